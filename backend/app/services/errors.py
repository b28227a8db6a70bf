"""Exception types raised by the service layer and translated to HTTP errors by the routers."""


class ExternalCapabilityError(RuntimeError):
    """An external AI call failed in transport, or returned something we could not parse."""


class AnalysisFailedError(ExternalCapabilityError):
    """Site image analysis failed."""


class ExtractionFailedError(ExternalCapabilityError):
    """Free-text extraction (rates or tender items) failed."""


class MatchingFailedError(ExternalCapabilityError):
    """Semantic matching of a tender item failed."""


class CatalogImportError(ValueError):
    """A backup or CSV file could not be imported. The catalog is left untouched."""


class CatalogItemNotFound(KeyError):
    """No catalog item with the requested id."""
