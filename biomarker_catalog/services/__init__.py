from .catalog_service import BiomarkerCatalog
