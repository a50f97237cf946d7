from .contract_serializers import (
    BindingTermsSerializer,
    ContractDetailSerializer,
    ContractSerializer,
    ContractSignatureSerializer,
    ContractTermsUpdateSerializer,
)


__all__ = [
    "BindingTermsSerializer",
    "ContractDetailSerializer",
    "ContractSerializer",
    "ContractSignatureSerializer",
    "ContractTermsUpdateSerializer",
]
