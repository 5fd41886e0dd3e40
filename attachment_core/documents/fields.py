"""Field descriptors for the document persistence engine."""

from typing import TYPE_CHECKING, Any

from attachment_core.exceptions import FieldTypeError

if TYPE_CHECKING:
    from .document import Document


class Field:
    """Scalar field stored on a document.

    @public

    Declared in a Document class body (``title = Field(str)``) or registered
    programmatically with Document.register_field(). Reading returns the
    current value (or the default); writing validates the type and marks the
    field as changed.

    Attributes:
        type_: Accepted Python type(s).
        nullable: Whether None is a valid value.
        default: Value returned before the field is first written.
        attachment: Name of the attachment that owns this field, if any.
    """

    def __init__(
        self,
        type_: type | tuple[type, ...],
        *,
        nullable: bool = True,
        default: Any = None,
        attachment: str | None = None,
    ) -> None:
        self.type_ = type_
        self.nullable = nullable
        self.default = default
        self.attachment = attachment
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def validate(self, value: Any) -> Any:
        if value is None:
            if not self.nullable:
                raise FieldTypeError(f"Field '{self.name}' is not nullable")
            return value
        # bool is an int subclass; keep integer fields strict
        if isinstance(value, bool) and self.type_ is int:
            raise FieldTypeError(f"Field '{self.name}' expects int, got bool")
        if not isinstance(value, self.type_):
            raise FieldTypeError(f"Field '{self.name}' expects {self.type_}, got {type(value).__name__}")
        return value

    def __get__(self, instance: "Document | None", owner: type) -> Any:
        if instance is None:
            return self
        return instance.read_attribute(self.name)

    def __set__(self, instance: "Document", value: Any) -> None:
        instance.write_attribute(self.name, value)

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, type_={self.type_!r}, nullable={self.nullable})"
