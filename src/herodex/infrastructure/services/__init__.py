from .image_cache import UNAVAILABLE, FileImageLoader, ImageCache, ImageHandle
from .prefetcher import PrefetchPlan, PrefetchReport, Prefetcher, plan_prefetch

__all__ = [
    "FileImageLoader",
    "ImageCache",
    "ImageHandle",
    "PrefetchPlan",
    "PrefetchReport",
    "Prefetcher",
    "UNAVAILABLE",
    "plan_prefetch",
]
