"""Custom exception hierarchy for HeroDex."""

from __future__ import annotations


class HeroDexError(Exception):
    """Base class for all custom errors raised by HeroDex."""


# --- 3-layer hierarchy ---

class DomainError(HeroDexError):
    """Base class for domain-level errors."""


class InfrastructureError(HeroDexError):
    """Base class for infrastructure-level errors."""


class ApplicationError(HeroDexError):
    """Base class for application-level errors."""


# --- Domain errors ---

class CatalogLoadError(DomainError):
    """Raised when the catalog cannot be read or has an invalid top-level shape.

    This is the only error class that blocks interactive use.
    """


class CatalogNotLoadedError(DomainError):
    """Raised when an operation needs a catalog before one was loaded."""


# --- Infrastructure errors ---

class JsonIOError(InfrastructureError):
    """Raised when a JSON document cannot be read or written."""


class ImageLoadError(InfrastructureError):
    """Raised by image loaders when a reference cannot be decoded."""


# --- Application errors ---

class ManifestBuildError(ApplicationError):
    """Raised when the catalog builder cannot produce a manifest."""


# --- Settings ---

class SettingsError(HeroDexError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


__all__ = [
    "ApplicationError",
    "CatalogLoadError",
    "CatalogNotLoadedError",
    "DomainError",
    "HeroDexError",
    "ImageLoadError",
    "InfrastructureError",
    "JsonIOError",
    "ManifestBuildError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
]
