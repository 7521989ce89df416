#!/usr/bin/env python3
"""
App Bundler - command line entry point
Inspect manifests, platforms and icons ahead of packaging
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from app_bundler.core.errors import BundlerError
from app_bundler.core.info import get_bundler_info
from app_bundler.core.platform import get_icon_requirements
from app_bundler.core.session import BuildSession
from app_bundler.core.settings import SettingsManager
from app_bundler.generators.icons import (IconCreateOptions, IconResizeOptions, create_icon,
                                          create_ico, resize_icon, validate_icon)
from app_bundler.utils.system import sanitize_name
from app_bundler.utils.i18n import _

logger = logging.getLogger(__name__)


def _print_json(data):
    print(json.dumps(data, indent=2))


def _read_bytes(path):
    with open(path, 'rb') as f:
        return f.read()


def _write_bytes(path, data):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info("Wrote %s (%d bytes)", path, len(data))


def cmd_info(args, session):
    _print_json(get_bundler_info())
    return 0


def cmd_platform(args, session):
    _print_json(session.platform_info().to_dict())
    return 0


def cmd_requirements(args, session):
    _print_json([r.to_dict() for r in get_icon_requirements(args.platform)])
    return 0


def cmd_sanitize(args, session):
    print(sanitize_name(args.name))
    return 0


def cmd_manifest(args, session):
    session.set_app_dir(args.app_dir)
    _print_json(session.resolve_manifest().to_dict())
    return 0


def cmd_icon_create(args, session):
    options = IconCreateOptions(
        size=args.size if args.size is not None else session.settings.get('icon-size'),
        color=args.color or session.settings.get('icon-color'),
    )
    _write_bytes(args.output, create_icon(options))
    return 0


def cmd_icon_validate(args, session):
    validation = validate_icon(_read_bytes(args.file),
                               max_bytes=session.settings.get('max-icon-bytes'))
    _print_json(validation.to_dict())
    return 0 if validation.is_valid else 1


def cmd_icon_resize(args, session):
    data = resize_icon(_read_bytes(args.file), IconResizeOptions(args.width, args.height),
                       max_bytes=session.settings.get('max-icon-bytes'))
    _write_bytes(args.output, data)
    return 0


def cmd_icon_set(args, session):
    validation, icons = session.prepare_icons(_read_bytes(args.file), args.platform)
    if not validation.is_valid:
        _print_json(validation.to_dict())
        return 1

    out_dir = Path(args.output_dir)
    for options, data in icons.items():
        _write_bytes(out_dir / f"icon_{options.width}x{options.height}.png", data)
    return 0


def cmd_icon_ico(args, session):
    _write_bytes(args.output, create_ico(_read_bytes(args.file),
                                         max_bytes=session.settings.get('max-icon-bytes')))
    return 0


def build_parser():
    """Create the argument parser"""
    parser = argparse.ArgumentParser(
        prog='app-bundler',
        description=_("Prepare icons, manifests and build settings for app bundles"))
    parser.add_argument('-v', '--verbose', action='store_true', help=_("Enable debug logging"))
    parser.add_argument('--config-dir', help=_("Directory holding settings.json"))

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('info', help=_("Show extension information"))
    p.set_defaults(func=cmd_info)

    p = sub.add_parser('platform', help=_("Show host platform and default bundle format"))
    p.set_defaults(func=cmd_platform)

    p = sub.add_parser('requirements', help=_("List required icon sizes for a platform"))
    p.add_argument('platform')
    p.set_defaults(func=cmd_requirements)

    p = sub.add_parser('sanitize', help=_("Derive an identifier from a name"))
    p.add_argument('name')
    p.set_defaults(func=cmd_sanitize)

    p = sub.add_parser('manifest', help=_("Parse the manifest of an app directory"))
    p.add_argument('app_dir')
    p.set_defaults(func=cmd_manifest)

    p = sub.add_parser('icon-create', help=_("Create a placeholder icon"))
    p.add_argument('output')
    p.add_argument('--size', type=int)
    p.add_argument('--color')
    p.set_defaults(func=cmd_icon_create)

    p = sub.add_parser('icon-validate', help=_("Validate an icon"))
    p.add_argument('file')
    p.set_defaults(func=cmd_icon_validate)

    p = sub.add_parser('icon-resize', help=_("Resize an icon"))
    p.add_argument('file')
    p.add_argument('output')
    p.add_argument('--width', type=int, required=True)
    p.add_argument('--height', type=int, required=True)
    p.set_defaults(func=cmd_icon_resize)

    p = sub.add_parser('icon-set', help=_("Generate every icon size a platform requires"))
    p.add_argument('file')
    p.add_argument('output_dir')
    p.add_argument('--platform', help=_("Target platform (default: host)"))
    p.set_defaults(func=cmd_icon_set)

    p = sub.add_parser('icon-ico', help=_("Pack an icon into a Windows .ico file"))
    p.add_argument('file')
    p.add_argument('output')
    p.set_defaults(func=cmd_icon_ico)

    return parser


def main(argv=None):
    """Main function"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    session = BuildSession(settings=SettingsManager(config_dir=args.config_dir))

    try:
        return args.func(args, session)
    except (BundlerError, OSError) as e:
        print(_("Error: {}").format(e), file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
