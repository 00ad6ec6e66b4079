from typing import Any


def uneditable(cls: Any):
    """Freeze instance attributes of ``cls`` once they have been assigned.

    Each attribute may be written exactly once, which is what a dataclass
    ``__init__`` does while the instance is built. Reassigning or deleting it
    afterwards raises.

    Args:
        cls (Any): The class to be decorated.

    Raises:
        TypeError: On reassignment of an attribute already set on the instance.
        TypeError: On deletion of an attribute already set on the instance.

    Returns:
        type: ``cls`` itself, patched in place.
    """
    orig_setattr, orig_delattr = cls.__setattr__, cls.__delattr__
    name_of = cls.__name__

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__dict__:
            raise TypeError(f"{name_of} is immutable: cannot reassign {name!r}")
        orig_setattr(self, name, value)

    def __delattr__(self, name: str) -> None:
        if name in self.__dict__:
            raise TypeError(f"{name_of} is immutable: cannot delete {name!r}")
        orig_delattr(self, name)

    cls.__setattr__ = __setattr__
    cls.__delattr__ = __delattr__
    return cls


__all__ = ["uneditable"]
