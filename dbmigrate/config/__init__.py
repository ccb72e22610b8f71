"""Configuration models and the dbmigrate.yaml loader."""
