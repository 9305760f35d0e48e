"""Graph database schema and index provisioning for the Stucco ontology."""

__version__ = "0.1.0"
