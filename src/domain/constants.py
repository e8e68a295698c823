"""Process-wide validation constants.

These are the defaults for ``ValidationRules``; they are loaded once at startup
and never changed per request.
"""

# SNOMED CT canonical system URI
SNOMED_SYSTEM = "http://snomed.info/sct"

# Resource types every submitted Bundle must contain, in reporting order
REQUIRED_RESOURCE_TYPES = ("Patient", "Encounter", "Condition", "Organization")

# Type tag of the collection-of-records container
BUNDLE_TYPE = "Bundle"
