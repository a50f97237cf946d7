from .contract import BindingTerms, Contract, ContractClause, ContractSignature, ContractVersion


__all__ = ["Contract", "BindingTerms", "ContractSignature", "ContractClause", "ContractVersion"]
