class CodeSigningError(Exception):
    """Base class for every error raised by the codesigning package."""


class InvalidValidityWindow(CodeSigningError, ValueError):
    pass


class UntrustedCSR(CodeSigningError):
    pass


class SignatureSelfCheckFailed(CodeSigningError):
    pass


class CertificateValidationError(CodeSigningError):
    """A certificate failed one of the trust checks.

    Subclasses name the property that failed so callers can audit it.
    """


class NotSelfSigned(CertificateValidationError):
    pass


class ValidityExpired(CertificateValidationError):
    pass


class MissingDigitalSignatureUsage(CertificateValidationError):
    pass


class MissingCodeSigningUsage(CertificateValidationError):
    pass


class InvalidSelfSignature(CertificateValidationError):
    pass


class PublicKeyMismatch(CertificateValidationError):
    pass


class KeyPairMismatch(CertificateValidationError):
    pass


# fixed three-tier chain
class IssuerMismatch(CertificateValidationError):
    pass


class ChainSignatureInvalid(CertificateValidationError):
    pass


class NotCertificateAuthority(CertificateValidationError):
    pass


class PathLengthExceeded(CertificateValidationError):
    pass


class MissingProjectInformation(CertificateValidationError):
    pass


class ProjectInformationMismatch(CertificateValidationError):
    pass


class MalformedProjectInformation(CertificateValidationError):
    pass
