from .declarative import ResourceReference, belongs_to_resource  # noqa
