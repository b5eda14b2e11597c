"""
Tests for the translation dispatcher and the X-Klaim routines.

Tests:
- Dispatch by variant, unhandled outcome for unknown variants
- Routine table coverage
- Fragments emitted by KlaimTranslator for each supported variant
- Identifier sanitising
"""

import pytest

from bpmn2klaim.config import GeneratorConfig
from bpmn2klaim.generator import KlaimTranslator, TranslationDispatcher, klaim_identifier
from bpmn2klaim.models import (
    Collaboration,
    ElementType,
    EndEvent,
    EventSubProcess,
    Gateway,
    MessageStartEvent,
    Pool,
    ProcessModel,
    SequenceFlow,
    SignalStartEvent,
    StartEvent,
    Task,
)


@pytest.fixture
def klaim_dispatcher():
    return TranslationDispatcher(KlaimTranslator().handlers())


# ===========================
# Dispatcher Tests
# ===========================


def test_dispatch_handled(recording_handlers):
    dispatcher = TranslationDispatcher(recording_handlers)
    outcome = dispatcher.dispatch(Task(id="A1"))

    assert outcome.handled
    assert outcome.fragment == "f(A1)"
    assert outcome.element_id == "A1"
    assert outcome.element_type == ElementType.TASK


def test_dispatch_unhandled_is_not_an_error(recording_handlers):
    dispatcher = TranslationDispatcher(recording_handlers)
    outcome = dispatcher.dispatch(Gateway(id="G1"))

    assert not outcome.handled
    assert outcome.fragment is None
    assert outcome.element_type == ElementType.EXCLUSIVE_GATEWAY


def test_routine_errors_propagate():
    def broken(element):
        raise RuntimeError("boom")

    dispatcher = TranslationDispatcher({ElementType.TASK: broken})

    with pytest.raises(RuntimeError, match="boom"):
        dispatcher.dispatch(Task(id="A1"))


def test_table_is_fixed_at_construction(recording_handlers):
    dispatcher = TranslationDispatcher(recording_handlers)
    recording_handlers.clear()

    assert dispatcher.can_handle(ElementType.TASK)


def test_variants_lists_registered_routines(recording_handlers):
    dispatcher = TranslationDispatcher(recording_handlers)

    assert dispatcher.variants == list(recording_handlers)
    assert ElementType.EXCLUSIVE_GATEWAY not in dispatcher.variants


def test_klaim_table_covers_all_translatable_variants(klaim_dispatcher):
    """Only gateways and pools are left without a routine."""
    missing = klaim_dispatcher.missing_handlers(ElementType)

    assert set(missing) == {
        ElementType.EXCLUSIVE_GATEWAY,
        ElementType.PARALLEL_GATEWAY,
        ElementType.POOL,
    }


# ===========================
# X-Klaim Fragment Tests
# ===========================


def test_start_event_fragments(klaim_dispatcher):
    assert klaim_dispatcher.dispatch(StartEvent(id="S1", name="Hungry")).fragment == "// start Hungry"
    assert (
        klaim_dispatcher.dispatch(MessageStartEvent(id="S2", message_ref="new order")).fragment
        == 'in("new_order")@self'
    )
    assert (
        klaim_dispatcher.dispatch(SignalStartEvent(id="S3", signal_ref="closed")).fragment
        == 'read("closed")@self'
    )


def test_message_start_without_ref_uses_name_then_id(klaim_dispatcher):
    assert klaim_dispatcher.dispatch(MessageStartEvent(id="S2", name="ping")).fragment == 'in("ping")@self'
    assert klaim_dispatcher.dispatch(MessageStartEvent(id="S2")).fragment == 'in("S2")@self'


def test_task_and_end_event_fragments(klaim_dispatcher):
    task = Task(id="T1", name="Ship order", task_kind="serviceTask")

    assert klaim_dispatcher.dispatch(task).fragment == (
        '// serviceTask Ship order\nout("T1", "done")@self'
    )
    assert klaim_dispatcher.dispatch(EndEvent(id="E1")).fragment == "// end E1"


def test_sequence_flow_fragments(klaim_dispatcher):
    plain = SequenceFlow(id="F1", source_ref="a", target_ref="b")
    conditional = SequenceFlow(id="F2", source_ref="a", target_ref="b", condition="x > 1")

    assert klaim_dispatcher.dispatch(plain).fragment == 'out("F1")@self'
    assert klaim_dispatcher.dispatch(conditional).fragment == '// when x > 1\nout("F2")@self'


def test_event_sub_process_fragment(klaim_dispatcher):
    sub_process = EventSubProcess(
        id="ESP1",
        name="Cancellation",
        trigger="message",
        trigger_ref="cancel",
        is_interrupting=False,
        activities=["Refund", "Notify customer"],
    )

    assert klaim_dispatcher.dispatch(sub_process).fragment == "\n".join(
        [
            "proc Cancellation() {",
            "\t// non-interrupting message event sub-process",
            '\tin("cancel")@self',
            '\tout("Refund", "done")@self',
            '\tout("Notify_customer", "done")@self',
            "}",
        ]
    )


def test_signal_event_sub_process_reads_signal(klaim_dispatcher):
    fragment = klaim_dispatcher.dispatch(
        EventSubProcess(id="ESP2", trigger="signal", trigger_ref="alarm")
    ).fragment

    assert fragment.startswith("proc ESP2() {")
    assert '\tread("alarm")@self' in fragment


def test_collaboration_fragment_lists_pools():
    model = ProcessModel(
        elements=[
            Collaboration(id="C", name="Order Handling", participant_refs=["A", "B", "ghost"]),
            Pool(id="A", name="Customer", process_ref="P1"),
            Pool(id="B"),
        ]
    )
    translator = KlaimTranslator(model, GeneratorConfig(net_address="tcp-10.0.0.1:9000"))

    assert translator.visit_collaboration(model.get_element_by_id("C")) == "\n".join(
        [
            'net Order_Handling physical "tcp-10.0.0.1:9000" {',
            "\tnode Customer {",
            "\t\t// runs P1",
            "\t}",
            "\tnode B {",
            "\t}",
            "}",
        ]
    )


def test_unnamed_collaboration_uses_configured_net_name():
    translator = KlaimTranslator(config=GeneratorConfig(net_name="Shop"))

    assert translator.visit_collaboration(Collaboration(id="C")).startswith("net Shop physical")


def test_comment_text_is_kept_on_one_line(klaim_dispatcher):
    start = klaim_dispatcher.dispatch(StartEvent(id="S1", name="Order\nreceived")).fragment
    end = klaim_dispatcher.dispatch(EndEvent(id="E1", name="  Order\r\n  shipped ")).fragment
    task = klaim_dispatcher.dispatch(Task(id="A1", name="Check\nstock", task_kind="userTask")).fragment
    flow = klaim_dispatcher.dispatch(
        SequenceFlow(id="F1", source_ref="A1", target_ref="E1", condition="a > 0\n  && b")
    ).fragment

    assert start == "// start Order received"
    assert end == "// end Order shipped"
    assert task == '// userTask Check stock\nout("A1", "done")@self'
    assert flow == '// when a > 0 && b\nout("F1")@self'


def test_colliding_pool_names_get_id_suffix():
    model = ProcessModel(
        elements=[
            Collaboration(id="C", participant_refs=["A", "B", "X"]),
            Pool(id="A", name="Customer A"),
            Pool(id="B", name="Customer-A"),
            Pool(id="X", name="Seller"),
        ]
    )
    fragment = KlaimTranslator(model).visit_collaboration(model.get_element_by_id("C"))

    assert "\tnode Customer_A_A {" in fragment
    assert "\tnode Customer_A_B {" in fragment
    assert "\tnode Seller {" in fragment


def test_colliding_event_sub_process_names_get_id_suffix():
    model = ProcessModel(
        elements=[
            EventSubProcess(id="ESP1", name="On cancel", process_id="P"),
            EventSubProcess(id="ESP2", name="On-cancel", process_id="P"),
            EventSubProcess(id="ESP3", name="On timeout", process_id="P"),
        ]
    )
    dispatcher = TranslationDispatcher(KlaimTranslator(model).handlers())
    headers = [
        dispatcher.dispatch(esp).fragment.splitlines()[0]
        for esp in model.get_event_sub_processes()
    ]

    assert headers == [
        "proc On_cancel_ESP1() {",
        "proc On_cancel_ESP2() {",
        "proc On_timeout() {",
    ]


# ===========================
# Identifier Tests
# ===========================


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Order Handling", "Order_Handling"),
        ("  ship-it! ", "ship_it"),
        ("1st step", "p1st_step"),
        ("???", "unnamed"),
        (None, "unnamed"),
        ("", "unnamed"),
    ],
)
def test_klaim_identifier(text, expected):
    assert klaim_identifier(text) == expected
