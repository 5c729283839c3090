"""UI Mapper: annotate screenshots with detected UI components and export them.

Sub-packages:
- core/     configuration, logging, errors, project storage and the session
- vision/   normalized geometry, viewport state and the schematic renderer
- ai/       remote component detection
- export/   PNG/JPEG, PDF, CSV and JSON encoders
- api/      FastAPI interface layer
"""

__version__ = "0.1.0"
