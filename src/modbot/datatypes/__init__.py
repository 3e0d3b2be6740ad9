"""
Typed records for everything a guild export contains.

One module per entity kind. Each kind is a frozen dataclass exposing
``check_types`` (field-level contract), ``from_dict`` and ``to_dict``
(``modbot-1.0.0`` wire format).
"""
