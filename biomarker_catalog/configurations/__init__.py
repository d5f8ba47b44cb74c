from .biomarker_tables import BiomarkerTables, load_biomarker_tables
