import enum
import logging

logger: logging.Logger = logging.getLogger("doomfront")
logger.addHandler(logging.StreamHandler())
# Set to highest level, so that by default nothing gets printed.
# Lower it to see what the frontend is doing (CVarInfoParser(debug=True) says more).
logger.setLevel(logging.CRITICAL)


class Serialize:
    """Serialization into plain, JSON-compatible data

    Attributes:
        __serialize_fields__ (Tuple[str]): Fields (aka attributes) to serialize.

    The result is meant for tooling consumption only. There is no way back,
    since string handles are written out as their resolved text and lose
    the interner they came from.
    """

    def serialize(self):
        fields = getattr(self, '__serialize_fields__')
        res = {f: _serialize(getattr(self, f)) for f in fields}
        res['__type__'] = type(self).__name__
        if hasattr(self, '_serialize'):
            self._serialize(res)
        return res


def _serialize(value):
    if isinstance(value, Serialize):
        return value.serialize()
    elif isinstance(value, enum.Enum):
        return value.name
    elif isinstance(value, (list, tuple)):
        return [_serialize(elem) for elem in value]
    elif isinstance(value, dict):
        return {key: _serialize(elem) for key, elem in value.items()}
    # assert value is None or isinstance(value, (bool, int, float, str)), value
    return value

