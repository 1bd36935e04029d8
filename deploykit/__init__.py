"""deploykit - deployment orchestration for the Drupal site on Acquia Cloud."""

__version__ = "0.1.0"
