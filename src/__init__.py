"""Bundle-Sentinel: FHIR Bundle completeness and terminology validation."""
