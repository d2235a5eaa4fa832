"""SASL framework: mechanism interfaces, provider registry, policy and QOP helpers."""

__version__ = "17.35.0"

__all__ = [
    "abstract_impl",
    "callbacks",
    "exceptions",
    "mechanisms",
    "policy",
    "providers",
    "sasl",
]