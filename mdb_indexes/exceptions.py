"""
Custom exceptions for MDB_INDEXES.

These exceptions provide more specific error types while maintaining
backward compatibility with RuntimeError.
"""

from typing import Any, Dict, Optional


class MongoDBIndexError(RuntimeError):
    """
    Base exception for index management errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (namespace,
                 index_name, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional dictionary with additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class EmptyKeyError(MongoDBIndexError):
    """
    Raised when an index without any key field is encoded or created.

    This is a programming error: it is reported, never silently fixed.

    Attributes:
        namespace: Namespace of the rejected index (if known)
    """

    def __init__(
        self,
        message: str = "the index key should not be empty",
        namespace: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if namespace:
            context["namespace"] = namespace
        super().__init__(message, context=context)
        self.namespace = namespace


class IndexDecodeError(MongoDBIndexError):
    """
    Raised when an index metadata document cannot be decoded.

    Attributes:
        document: The offending document (if available)
    """

    def __init__(
        self,
        message: str,
        document: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, context=context)
        self.document = document


class MissingKeyFieldError(IndexDecodeError):
    """Raised when an index document has no `key` sub-document."""

    def __init__(self, document: Optional[Any] = None) -> None:
        super().__init__("the index key must be defined", document=document)


class MissingNamespaceFieldError(IndexDecodeError):
    """Raised when a namespaced index document has no string `ns` field."""

    def __init__(self, document: Optional[Any] = None) -> None:
        super().__init__("the index namespace 'ns' must be defined", document=document)


class UnsupportedIndexTypeError(IndexDecodeError):
    """
    Raised when a key's wire value matches no known index type.

    Attributes:
        value: The unsupported wire value
        field: The key field carrying it (if known)
    """

    def __init__(self, value: Any, field: Optional[str] = None) -> None:
        context: Dict[str, Any] = {"value": repr(value)}
        if field is not None:
            context["field"] = field
        super().__init__("unsupported index type", context=context)
        self.value = value
        self.field = field


class ConfigurationError(MongoDBIndexError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error (if available)
            config_value: Configuration value that caused the error (if available)
            context: Additional context information
        """
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class InitializationError(MongoDBIndexError):
    """
    Raised when the MongoDB connection cannot be established.

    Attributes:
        message: Error message
        mongo_uri: MongoDB connection URI (if available)
        db_name: Database name (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        mongo_uri: Optional[str] = None,
        db_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if mongo_uri:
            context["mongo_uri"] = mongo_uri
        if db_name:
            context["db_name"] = db_name
        super().__init__(message, context=context)
        self.mongo_uri = mongo_uri
        self.db_name = db_name
