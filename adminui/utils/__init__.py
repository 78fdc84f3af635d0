# -*- coding: utf-8 -*-
"""
utils

Small shared helpers.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""


# The End
