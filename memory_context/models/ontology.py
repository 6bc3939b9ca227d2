"""
Entity types registered with the knowledge graph.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class EntityAttribute:
    """A typed attribute on a custom entity type."""
    name: str
    type: str  # string | array
    description: str


@dataclass
class EntityTypeDefinition:
    """A custom entity type the graph extracts from ingested data."""
    name: str
    description: str
    attributes: List[EntityAttribute] = field(default_factory=list)


COMPANY = EntityTypeDefinition(name='Company',
                               description='A business organization',
                               attributes=[
                                   EntityAttribute('name', 'string', 'Company name'),
                                   EntityAttribute('industry', 'string', 'Industry sector'),
                                   EntityAttribute('size', 'string', 'Company size'),
                                   EntityAttribute('website', 'string', 'Company website'),
                                   EntityAttribute('description', 'string', 'Company description'),
                               ])

PERSON = EntityTypeDefinition(name='Person',
                              description='An individual person',
                              attributes=[
                                  EntityAttribute('name', 'string', 'Person name'),
                                  EntityAttribute('role', 'string', 'Job role or title'),
                                  EntityAttribute('company', 'string', 'Associated company'),
                                  EntityAttribute('email', 'string', 'Email address'),
                                  EntityAttribute('phone', 'string', 'Phone number'),
                                  EntityAttribute('expertise', 'array', 'Areas of expertise'),
                              ])

DEFAULT_ONTOLOGY: Dict[str, EntityTypeDefinition] = {COMPANY.name: COMPANY, PERSON.name: PERSON}
