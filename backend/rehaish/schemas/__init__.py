"""Pydantic schemas for the Rehaish API."""

from rehaish.schemas.base import *
from rehaish.schemas.auth import *
from rehaish.schemas.property import *
from rehaish.schemas.application import *
from rehaish.schemas.lease import *
from rehaish.schemas.payment import *
