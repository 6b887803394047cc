#!/usr/bin/python
# -*- coding: utf-8 -*-
import sys

from ._main import main

sys.exit(main())
