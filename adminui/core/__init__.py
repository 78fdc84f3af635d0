# -*- coding: utf-8 -*-
"""
core

Page registry, dispatcher and model-driven CRUD engine.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""


# The End
