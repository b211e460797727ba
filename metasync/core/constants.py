"""Salesforce metadata names and annotation keys."""

SALESFORCE = "salesforce"
CUSTOM_FIELD = "CustomField"
CUSTOM_OBJECT = "CustomObject"
METADATA_OBJECT_NAME_FIELD = "fullName"
METADATA_PROFILE_OBJECT = "Profile"
PROFILE_NAME_SYSTEM_ADMINISTRATOR = "Admin"
CUSTOM_SUFFIX = "__c"

# Annotation names
API_NAME = "api_name"
LABEL = "label"
REQUIRED = "required"
RESTRICTED_PICKLIST = "restricted_pick_list"
PICKLIST_VALUES = "values"
FIELD_LEVEL_SECURITY = "field_level_security"
