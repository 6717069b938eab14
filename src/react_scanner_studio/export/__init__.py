"""Static site export."""

from .static_site import StaticSite, build_static_site, inject_fetch_interceptor

__all__ = ["StaticSite", "build_static_site", "inject_fetch_interceptor"]
