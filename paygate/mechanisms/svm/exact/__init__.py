"""Exact payment scheme for SVM networks."""

from .register import register_exact_svm_server
from .server import ExactSvmScheme

__all__ = ["ExactSvmScheme", "register_exact_svm_server"]
