"""
Constants for the form builder.

Static lookup tables shared by the builder, the code generators and
the preview: supported form libraries, the field palette, per-variant
default properties and the list of components that need extra setup.
"""

import re

# Form libraries the code generator can target
REACT_HOOK_FORM = "react-hook-form"
TANSTACK_FORM = "tanstack-form"
BRING_YOUR_OWN = "bring-your-own"

FORM_LIBRARIES = (REACT_HOOK_FORM, TANSTACK_FORM, BRING_YOUR_OWN)

FORM_LIBRARY_LABELS = {
    REACT_HOOK_FORM: "React Hook Form",
    TANSTACK_FORM: "TanStack Form",
    BRING_YOUR_OWN: "Bring Your Own Form",
}

# Preference key for the selected library
LIBRARY_PREFERENCE_KEY = "formLibrary"

# Valid field name pattern (alphanumeric + underscore)
VALID_FIELD_NAME = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# Prefix of freshly generated field names
FIELD_NAME_PREFIX = "name_"
FIELD_NAME_DIGITS = 10

# Grid width used by row groups
GRID_COLUMNS = 12

# Palette order
FIELD_TYPES = [
    "Checkbox",
    "Combobox",
    "Date Picker",
    "Datetime Picker",
    "File Input",
    "Input",
    "Input OTP",
    "Location Input",
    "Multi Select",
    "Password",
    "Phone",
    "Select",
    "Signature Input",
    "Signature Pad",
    "Slider",
    "Smart Datetime Input",
    "Switch",
    "Tags Input",
    "Textarea",
    "Rating",
    "RadioGroup",
    "Credit Card",
]

DEFAULT_FIELD_CONFIG: dict[str, dict[str, str]] = {
    "Checkbox": {
        "label": "Use different settings for my mobile devices",
        "description": "You can manage your mobile notifications in the mobile settings page.",
    },
    "Combobox": {
        "label": "Language",
        "description": "This is the language that will be used in the dashboard.",
    },
    "Date Picker": {
        "label": "Date of birth",
        "description": "Your date of birth is used to calculate your age.",
    },
    "Datetime Picker": {
        "label": "Submission Date",
        "description": "Add the date of submission with detailly.",
    },
    "File Input": {
        "label": "Select File",
        "description": "Select a file to upload.",
    },
    "Input": {
        "label": "Username",
        "description": "This is your public display name.",
        "placeholder": "shadcn",
    },
    "Input OTP": {
        "label": "One-Time Password",
        "description": "Please enter the one-time password sent to your phone.",
    },
    "Location Input": {
        "label": "Select Country",
        "description": "If your country has states, it will be appear after selecting country",
    },
    "Multi Select": {
        "label": "Select your framework",
        "description": "Select multiple options.",
    },
    "Select": {
        "label": "Email",
        "description": "You can manage email addresses in your email settings.",
        "placeholder": "Select a verified email to display",
    },
    "Slider": {
        "label": "Set Price Range",
        "description": "Adjust the price by sliding.",
    },
    "Signature Input": {
        "label": "Sign here",
        "description": "Please provide your signature above",
    },
    "Signature Pad": {
        "label": "Your Signature",
        "description": "Click the pen button to sign",
    },
    "Smart Datetime Input": {
        "label": "What's the best time for you?",
        "description": "Please select the full time",
    },
    "Switch": {
        "label": "Marketing emails",
        "description": "Receive emails about new products, features, and more.",
    },
    "Tags Input": {
        "label": "Enter your tech stack.",
        "description": "Add tags.",
    },
    "Textarea": {
        "label": "Bio",
        "description": "You can @mention other users and organizations.",
    },
    "Password": {
        "label": "Password",
        "description": "Enter your password.",
    },
    "Phone": {
        "label": "Phone number",
        "description": "Enter your phone number.",
    },
    "Rating": {
        "label": "Rating",
        "description": "Please provide your rating.",
    },
    "RadioGroup": {
        "label": "Gender",
        "description": "Select your gender",
    },
    "Credit Card": {
        "label": "Credit Card Information",
        "description": "Enter your credit card details for payment.",
    },
}

# Variants whose generated code imports a component that is not part of
# the stock component set. Value: the component the consumer must add.
SPECIAL_COMPONENTS: dict[str, str] = {
    "Combobox": "Command + Popover",
    "Credit Card": "CreditCardInput",
    "Datetime Picker": "DatetimePicker",
    "File Input": "FileUploader",
    "Location Input": "LocationSelector",
    "Multi Select": "MultiSelector",
    "Phone": "PhoneInput",
    "Rating": "Rating",
    "Signature Input": "SignatureInput",
    "Signature Pad": "SignaturePad",
    "Smart Datetime Input": "SmartDatetimeInput",
    "Tags Input": "TagsInput",
}

# Value patterns for variants with a fixed value shape
PHONE_PATTERN = r"^\+?[1-9]\d{6,14}$"
CREDIT_CARD_PATTERN = r"^\d{13,19}$"
OTP_LENGTH = 6
# Ratings above this many stars are previewed as a number input
MAX_RATING_STARS = 10

UNSUPPORTED_MESSAGE = "This component type is not available in the preview."
