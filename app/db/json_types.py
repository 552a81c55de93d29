from pydantic import TypeAdapter
from sqlalchemy.types import Text, TypeDecorator


class JSONText(TypeDecorator):
    """Structured value stored as JSON text, validated on the way in and out.

    A row whose stored text does not match ``adapter`` raises
    ``pydantic.ValidationError`` on load instead of handing back a loose dict.
    """

    impl = Text
    cache_ok = True

    def __init__(self, adapter: TypeAdapter, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.adapter = adapter

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return self.adapter.dump_json(
            self.adapter.validate_python(value), by_alias=True
        ).decode("utf-8")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self.adapter.validate_json(value)
