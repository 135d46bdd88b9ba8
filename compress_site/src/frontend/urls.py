from django.urls import path

from . import views

urlpatterns = [
    path("", views.compress_pdf_page, name="compress_pdf_page"),
    path("select/", views.select_file, name="compress_select_file"),
    path("remove/", views.remove_file, name="compress_remove_file"),
    path("level/", views.set_level, name="compress_set_level"),
    path("run/", views.run_compression, name="compress_run"),
    path("redownload/", views.redownload, name="compress_redownload"),
    path("download/", views.download, name="compress_download"),
]
