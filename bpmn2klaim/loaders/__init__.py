"""
Loaders building a ProcessModel from diagram files.
"""

from bpmn2klaim.loaders.bpmn_xml import BpmnXmlLoader, load_bpmn, parse_bpmn

__all__ = ["BpmnXmlLoader", "load_bpmn", "parse_bpmn"]
