"""Pytest configuration for bpmn2klaim tests."""

import logging
import sys
from pathlib import Path

import pytest
from loguru import logger

# Add the project root to the path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from bpmn2klaim.core.observability import InterceptHandler, ObservabilityManager  # noqa: E402
from bpmn2klaim.models import (  # noqa: E402
    Collaboration,
    ElementType,
    EventSubProcess,
    Gateway,
    Pool,
    ProcessModel,
    SequenceFlow,
    StartEvent,
    Task,
)


@pytest.fixture(autouse=True)
def reset_observability():
    """Drop CLI logging setup between tests."""
    yield
    ObservabilityManager.reset()
    logger.remove()
    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not isinstance(h, InterceptHandler)]


# ===========================
# Routine tables
# ===========================


def fragment(element) -> str:
    """Fragment used by the recording routine table."""
    return f"f({element.id})"


@pytest.fixture
def recording_handlers():
    """Routine table emitting ``f(<id>)`` for every variant except gateways."""
    return {
        element_type: fragment
        for element_type in ElementType
        if element_type not in (ElementType.EXCLUSIVE_GATEWAY, ElementType.PARALLEL_GATEWAY)
    }


# ===========================
# Process models
# ===========================


@pytest.fixture
def linear_model():
    """S1 -> C1 -> A1 in process P."""
    return ProcessModel(
        name="linear",
        elements=[
            StartEvent(id="S1", name="Start", process_id="P", outgoing="C1"),
            SequenceFlow(id="C1", process_id="P", source_ref="S1", target_ref="A1"),
            Task(id="A1", name="Check order", process_id="P"),
        ],
    )


@pytest.fixture
def cyclic_model():
    """S1 -> C1 -> A1 -> C2 -> S1 in process P."""
    return ProcessModel(
        name="cyclic",
        elements=[
            StartEvent(id="S1", process_id="P", outgoing="C1"),
            SequenceFlow(id="C1", process_id="P", source_ref="S1", target_ref="A1"),
            Task(id="A1", process_id="P", outgoing="C2"),
            SequenceFlow(id="C2", process_id="P", source_ref="A1", target_ref="S1"),
        ],
    )


@pytest.fixture
def gateway_model():
    """S1 -> C1 -> G1 -> C2 -> A1; the gateway has no routine."""
    return ProcessModel(
        elements=[
            StartEvent(id="S1", process_id="P", outgoing="C1"),
            SequenceFlow(id="C1", process_id="P", source_ref="S1", target_ref="G1"),
            Gateway(id="G1", process_id="P", outgoing="C2"),
            SequenceFlow(id="C2", process_id="P", source_ref="G1", target_ref="A1"),
            Task(id="A1", process_id="P"),
        ],
    )


@pytest.fixture
def collaboration_model():
    """Two pools in one collaboration, each running one process."""
    return ProcessModel(
        elements=[
            Collaboration(id="Collab_1", name="Shop", participant_refs=["Pool_C", "Pool_S"]),
            Pool(id="Pool_C", name="Customer", process_ref="P_customer"),
            Pool(id="Pool_S", name="Seller", process_ref="P_seller"),
            StartEvent(id="S1", process_id="P_customer", outgoing="C1"),
            SequenceFlow(id="C1", process_id="P_customer", source_ref="S1", target_ref="A1"),
            Task(id="A1", name="Place order", process_id="P_customer"),
            StartEvent(id="S2", process_id="P_seller"),
            EventSubProcess(
                id="ESP1",
                name="Cancel order",
                process_id="P_seller",
                trigger="message",
                trigger_ref="cancel",
                activities=["Refund"],
            ),
        ],
    )


# ===========================
# BPMN XML
# ===========================


ORDER_BPMN = """<?xml version="1.0" encoding="UTF-8"?>
<bpmn:definitions xmlns:bpmn="http://www.omg.org/spec/BPMN/20100524/MODEL"
                  xmlns:bpmndi="http://www.omg.org/spec/BPMN/20100524/DI"
                  id="Definitions_1">
  <bpmn:collaboration id="Collab_1" name="Order Handling">
    <bpmn:participant id="Pool_C" name="Customer" processRef="P_customer" />
    <bpmn:participant id="Pool_S" name="Seller" processRef="P_seller" />
  </bpmn:collaboration>
  <bpmn:message id="Msg_order" name="order" />
  <bpmn:message id="Msg_cancel" name="cancel" />
  <bpmn:signal id="Sig_close" name="shopClosed" />
  <bpmn:process id="P_customer" isExecutable="true">
    <bpmn:startEvent id="Start_C" name="Hungry">
      <bpmn:outgoing>Flow_1</bpmn:outgoing>
    </bpmn:startEvent>
    <bpmn:userTask id="Task_place" name="Place order">
      <bpmn:incoming>Flow_1</bpmn:incoming>
      <bpmn:outgoing>Flow_2</bpmn:outgoing>
    </bpmn:userTask>
    <bpmn:endEvent id="End_C" name="Ordered">
      <bpmn:incoming>Flow_2</bpmn:incoming>
    </bpmn:endEvent>
    <bpmn:sequenceFlow id="Flow_1" sourceRef="Start_C" targetRef="Task_place" />
    <bpmn:sequenceFlow id="Flow_2" sourceRef="Task_place" targetRef="End_C" />
  </bpmn:process>
  <bpmn:process id="P_seller" isExecutable="true">
    <bpmn:startEvent id="Start_S" name="Order received">
      <bpmn:messageEventDefinition messageRef="Msg_order" />
    </bpmn:startEvent>
    <bpmn:serviceTask id="Task_ship" name="Ship order" />
    <bpmn:exclusiveGateway id="Gw_1" name="In stock?" />
    <bpmn:sequenceFlow id="Flow_3" sourceRef="Start_S" targetRef="Task_ship" />
    <bpmn:sequenceFlow id="Flow_4" sourceRef="Task_ship" targetRef="Gw_1">
      <bpmn:conditionExpression>stock &gt; 0</bpmn:conditionExpression>
    </bpmn:sequenceFlow>
    <bpmn:startEvent id="Start_Sig" name="Closed">
      <bpmn:signalEventDefinition signalRef="Sig_close" />
    </bpmn:startEvent>
    <bpmn:subProcess id="Esp_cancel" name="Cancellation" triggeredByEvent="true">
      <bpmn:startEvent id="Esp_start" isInterrupting="false">
        <bpmn:messageEventDefinition messageRef="Msg_cancel" />
      </bpmn:startEvent>
      <bpmn:task id="Esp_refund" name="Refund" />
      <bpmn:task id="Esp_notify" name="Notify customer" />
    </bpmn:subProcess>
  </bpmn:process>
</bpmn:definitions>
"""


@pytest.fixture
def order_bpmn_xml():
    return ORDER_BPMN


@pytest.fixture
def order_bpmn_file(tmp_path):
    path = tmp_path / "order.bpmn"
    path.write_text(ORDER_BPMN)
    return path
