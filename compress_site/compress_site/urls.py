from django.core.cache import cache
from django.http import JsonResponse
from django.urls import include, path
from django.views.decorators.http import require_http_methods
from django.views.generic import RedirectView

from compress_site.swagger import schema_view


@require_http_methods(["GET"])
def health_check(request):
    """Health check endpoint for Docker and load balancers."""
    try:
        cache.set("health_check", "ok", 10)
        if cache.get("health_check") != "ok":
            raise RuntimeError("cache round-trip failed")
        return JsonResponse({"status": "ok"})
    except Exception as e:
        return JsonResponse({"status": "error", "error": str(e)}, status=503)


urlpatterns = [
    path("health/", health_check, name="health_check"),
    path("api/", include("src.api.urls")),
    path("compress/", include("src.frontend.urls")),
    path("", RedirectView.as_view(pattern_name="compress_pdf_page", permanent=False)),
    path(
        "swagger/",
        schema_view.with_ui("swagger", cache_timeout=0),
        name="schema-swagger-ui",
    ),
    path(
        "swagger.json",
        schema_view.without_ui(cache_timeout=0),
        name="schema-json",
    ),
]
