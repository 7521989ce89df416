"""
Validation utilities for manifest fields and icon options
"""

import re
from app_bundler.core.errors import ManifestValidationError, InvalidOptionsError
from app_bundler.utils.i18n import _

IDENTIFIER_PATTERN = re.compile(r'^[a-z0-9][a-z0-9-]*$')
HEX_COLOR_PATTERN = re.compile(r'^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


def is_valid_identifier(identifier):
    """Check an identifier against the sanitized-name grammar"""
    if not isinstance(identifier, str) or not IDENTIFIER_PATTERN.match(identifier):
        return False
    return '--' not in identifier and not identifier.endswith('-')


def validate_identifier(identifier):
    """Validate application identifier"""
    if not is_valid_identifier(identifier):
        raise ManifestValidationError(
            _("Invalid identifier '{}': use lowercase letters, digits and single "
              "hyphens, starting with a letter or digit").format(identifier),
            field='identifier')

    return identifier


def validate_required_string(data, key):
    """Validate a required, non-empty string field of a manifest table"""
    if key not in data or data[key] is None:
        raise ManifestValidationError(_("Missing required field: {}").format(key), field=key)

    value = data[key]
    if not isinstance(value, str):
        raise ManifestValidationError(
            _("Field '{}' must be a string").format(key), field=key)

    if not value.strip():
        raise ManifestValidationError(
            _("Field '{}' must not be empty").format(key), field=key)

    return value.strip()


def validate_optional_string(data, key):
    """Validate an optional string field, returning None when absent"""
    value = data.get(key)
    if value is None:
        return None

    if not isinstance(value, str):
        raise ManifestValidationError(
            _("Field '{}' must be a string").format(key), field=key)

    return value


def validate_hex_color(color):
    """Validate a #RGB or #RRGGBB color and return it as an (r, g, b) tuple"""
    if not isinstance(color, str) or not HEX_COLOR_PATTERN.match(color):
        raise InvalidOptionsError(
            _("Invalid color '{}': expected #RGB or #RRGGBB").format(color))

    digits = color[1:]
    if len(digits) == 3:
        digits = ''.join(c * 2 for c in digits)

    return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))


def validate_dimension(value, name):
    """Validate a pixel dimension (strictly positive integer)"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOptionsError(
            _("{} must be an integer, got {!r}").format(name, value))

    if value <= 0:
        raise InvalidOptionsError(
            _("{} must be greater than zero, got {}").format(name, value))

    return value
