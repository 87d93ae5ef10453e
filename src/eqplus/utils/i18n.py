#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# i18n.py - Utilities for translation support
#
import gettext
import os
from typing import Callable

# Default for system install, overridable for portable builds
locale_dir = os.environ.get("EQPLUS_LOCALE_DIR", "/usr/share/locale")

# Configure the translation text domain for eqplus
gettext.bindtextdomain("eqplus", locale_dir)
gettext.textdomain("eqplus")

# Export _ directly as the translation function with explicit type
_: Callable[[str], str] = gettext.gettext
