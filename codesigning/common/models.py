from typing import Any, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict


class KeyPair(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    public_key: Any
    private_key: Any


class BasicConstraints(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["basicConstraints"] = "basicConstraints"
    ca: bool = False
    path_length: Optional[int] = None
    critical: bool = False


class KeyUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["keyUsage"] = "keyUsage"
    digital_signature: bool = False
    content_commitment: bool = False
    key_encipherment: bool = False
    data_encipherment: bool = False
    key_agreement: bool = False
    key_cert_sign: bool = False
    crl_sign: bool = False
    critical: bool = True


class ExtKeyUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["extKeyUsage"] = "extKeyUsage"
    server_auth: bool = False
    client_auth: bool = False
    code_signing: bool = False
    email_protection: bool = False
    time_stamping: bool = False
    critical: bool = True


class ProjectInformation(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["expoProjectInformation"] = "expoProjectInformation"
    app_id: str
    scope_key: str

    @property
    def critical(self) -> bool:
        # generic x509 verifiers reject unknown critical extensions
        return False

    @property
    def value(self) -> str:
        return f"{self.app_id},{self.scope_key}"


Extension = Union[BasicConstraints, KeyUsage, ExtKeyUsage, ProjectInformation]

# (name-or-shortName, value)
NameAttribute = Tuple[str, str]
