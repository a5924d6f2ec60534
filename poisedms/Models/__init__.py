from .Entity import ENTITY_MODELS, Architect, ContactMixin, Contractor, Customer
from .Project import Project
