from ._version import __version__
from .api import load_docs, proxify
from .chain import ChainLinkMeta, ChainRepair, iter_chain, parent_of, real_parent_of
from .method import InterceptedMethod, MethodInterceptor
from .prototype import PrototypeInterceptor, ProxyMeta
from .proxifier import Proxifier
from .registry import ProxyRegistry
from .schema import ClassItem, ClassRegistry, Param
from .settings import ProxifySettings
from .utils import (
    ArgumentViolation,
    ConstructionConflict,
    MetadataError,
    ProxifyError,
    RegistryError,
)
from .validator import ArgumentValidator, NullValidator, Validator

__all__ = [
    "proxify",
    "load_docs",
    "Proxifier",
    "ProxifySettings",
    "ClassRegistry",
    "ClassItem",
    "Param",
    "MethodInterceptor",
    "InterceptedMethod",
    "PrototypeInterceptor",
    "ProxyMeta",
    "ProxyRegistry",
    "ChainLinkMeta",
    "ChainRepair",
    "iter_chain",
    "parent_of",
    "real_parent_of",
    "Validator",
    "ArgumentValidator",
    "NullValidator",
    "ProxifyError",
    "ConstructionConflict",
    "ArgumentViolation",
    "RegistryError",
    "MetadataError",
    "__version__",
]
