"""
Exceptions raised by the certificate generation pipeline.

Every fatal error derives from ``CertificateError`` so the top-level pipeline can
route it to the fallback report.
"""


class CertificateError(Exception):
    """Base exception for certificate generation failures."""

    def __init__(self, message: str, city: str | None = None):
        self.message = message
        self.city = city
        super().__init__(self.message)


class UnknownCity(CertificateError):
    """The requested city has no entry in the template registry."""


class AssetFetchFailed(CertificateError):
    """A template or page image could not be retrieved."""


class TemplateNotFound(AssetFetchFailed):
    """The base document of a city could not be retrieved."""


class InvalidAsset(CertificateError):
    """An asset was retrieved but could not be parsed."""


class UnsupportedImageFormat(InvalidAsset):
    """A page image is not a decodable JPEG or PNG."""


class MissingTemplateSource(CertificateError):
    """A city entry has neither a template path nor page images."""


class HandleConsumed(CertificateError):
    """A document handle was exported more than once."""
