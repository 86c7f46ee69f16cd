"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_API_PORT = 3001
DEFAULT_DB_PORT = 3306
DEFAULT_CONNECT_TIMEOUT = 5
DEFAULT_HTTP_TIMEOUT = 10.0

TABLE_NAME = "registros"

TEMP_ID_LENGTH = 9
STAGING_SLOT_KEY = "registros.staging"

EXPORT_SHEET_NAME = "Datos"
TEMPLATE_SHEET_NAME = "Plantilla"
TEMPLATE_FILENAME = "plantilla_empleados.xlsx"
PROJECTS_SHEET_NAME = "Proyectos"

# Projects offered by the entry form. The field itself stays free text.
PROJECTS = (
    "SUMAPAZGICA OP VIAL",
    "RUTA AL SUR OP VIAL",
    "VINUS OP VIAL",
    "ACCENORTE",
    "FRIGORINUS VIGILANCIA",
    "MINEROS LA MARIA VIGILANCIA",
    "APP GICA (VIGILANCIA)",
    "D5 EL FARO 118 VIGILANCIA",
    "VINUS - VIGILANCIA",
    "RUTA AL SUR - VIGILANCIA",
    "RUTAS DEL VALLE - VIGILANCIA",
    "ACCENORTE - VIGILANCIA",
    "CONSORCIO PEAJES 2526 - VIGILANCIA",
    "CONSORCIO PEAJES 2526 - PLANTA",
    "RUTA AL SUR - RECOLECTOR TEMPORADA",
    "RUTAS DEL VALLE - RECOLECTOR TEMPORADA",
    "GICA - RECOLECTOR TEMPORADA",
    "CONSORCIO PEAJES 2526 - CANGUROS",
    "RUTA AL SUR PLANTA",
    "RUTAS DEL VALLE PLANTA",
    "GICA PLANTA",
    "VINUS PLANTA",
    "ADMINISTRACION",
    "TOLIS",
)
