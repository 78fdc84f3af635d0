# -*- coding: utf-8 -*-
"""sample_app

Test application package holding the Tortoise models used by adapter tests."""


# The End
