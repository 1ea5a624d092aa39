"""Renderers for laid-out conversations."""

from convo_flow.renderers.base import Renderer
from convo_flow.renderers.svg import SvgRenderer

__all__ = ["Renderer", "SvgRenderer"]
