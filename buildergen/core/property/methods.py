"""Names of the builder methods generated for a property."""

from .models import Property


def getter(prop: Property) -> str:
    return prop.getter_name


def setter(prop: Property) -> str:
    return "set" + prop.capitalized_name


def mapper(prop: Property) -> str:
    return "map" + prop.capitalized_name


def clear_method(prop: Property) -> str:
    return "clear" + prop.capitalized_name


def add_method(prop: Property) -> str:
    return "add" + prop.capitalized_name


def add_all_method(prop: Property) -> str:
    return "addAll" + prop.capitalized_name


def remove_method(prop: Property) -> str:
    return "remove" + prop.capitalized_name


def mutator(prop: Property) -> str:
    return "mutate" + prop.capitalized_name


def put_method(prop: Property) -> str:
    return "put" + prop.capitalized_name


def put_all_method(prop: Property) -> str:
    return "putAll" + prop.capitalized_name
