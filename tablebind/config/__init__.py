"""YAML table descriptors validated with jsonschema."""
