from django.urls import path

from .compress_pdf.views import CompressPDFActionAPIView

urlpatterns = [
    path(
        "compress-pdf/", CompressPDFActionAPIView.as_view(), name="compress_pdf_api"
    ),
]
