from __future__ import annotations

import unittest
from dataclasses import replace
from typing import Any, Mapping

from return_notifications.application.ports import NotificationPorts
from return_notifications.application.process import (
    dispatch_notifications,
    do_return_operation,
    new_notification_result,
)
from return_notifications.domain.entities import (
    Entity,
    EntityKind,
    NotificationEvents,
)
from return_notifications.errors import EntityNotFound, IncompleteTemplate, InvalidInput

RESELLER = Entity(id=5, kind=EntityKind.SELLER, name="Northwind")
CLIENT = Entity(
    id=10,
    kind=EntityKind.CONTRACTOR,
    name="Alice",
    seller_id=5,
    email="alice@example.com",
    mobile="+15555550123",
)
CREATOR = Entity(id=20, kind=EntityKind.EMPLOYEE, name="Dana")
EXPERT = Entity(id=21, kind=EntityKind.EMPLOYEE, name="Evan")


def make_request(**overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "resellerId": 5,
        "notificationType": 2,
        "clientId": 10,
        "creatorId": 20,
        "expertId": 21,
        "complaintId": 301,
        "complaintNumber": "CR-301",
        "consumptionId": 401,
        "consumptionNumber": "CN-401",
        "agreementNumber": "AG-77",
        "date": "2026-10-17",
        "differences": {"from": 1, "to": 2},
    }
    return base | overrides


class FakeCollaborators:
    """Recording test doubles for every port."""

    def __init__(
        self,
        *,
        entities: list[Entity] | None = None,
        email_from: str = "returns@northwind.example.com",
        recipients: list[str] | None = None,
        sms_outcome: tuple[bool, str] = (True, ""),
        failing_recipients: set[str] | None = None,
    ) -> None:
        self.entities = {
            (str(entity.kind), entity.id): entity
            for entity in (entities if entities is not None else [RESELLER, CLIENT, CREATOR, EXPERT])
        }
        self.email_from = email_from
        self.recipients = (
            recipients
            if recipients is not None
            else ["warehouse@northwind.example.com", "support@northwind.example.com"]
        )
        self.sms_outcome = sms_outcome
        self.failing_recipients = failing_recipients or set()
        self.calls: list[str] = []
        self.sent_messages: list[dict[str, Any]] = []
        self.sent_sms: list[dict[str, Any]] = []
        self.phrase_calls: list[tuple[str, Any, int]] = []

    def lookup_entity(self, kind: str, entity_id: int) -> Entity | None:
        self.calls.append(f"lookup:{kind}:{entity_id}")
        return self.entities.get((str(kind), entity_id))

    def render_phrase(self, key: str, params: Mapping[str, Any] | None, reseller_id: int) -> str:
        self.phrase_calls.append((key, params, reseller_id))
        if key == "PositionStatusHasChanged":
            return f"from {params['FROM']} to {params['TO']}"
        return f"{key}#{reseller_id}"

    def reseller_email_from(self, reseller_id: int) -> str:
        self.calls.append(f"email_from:{reseller_id}")
        return self.email_from

    def permitted_emails(self, reseller_id: int, event: str) -> list[str]:
        self.calls.append(f"permits:{reseller_id}:{event}")
        return list(self.recipients)

    def send_messages(
        self,
        messages: list[dict[str, str]],
        *,
        reseller_id: int,
        client_id: int | None = None,
        event: str,
    ) -> None:
        self.calls.append("send_messages")
        for message in messages:
            if message["emailTo"] in self.failing_recipients:
                raise RuntimeError(f"mailbox {message['emailTo']} rejected")
            self.sent_messages.append(
                {"message": message, "reseller_id": reseller_id, "client_id": client_id, "event": event}
            )

    def send_sms(
        self,
        *,
        reseller_id: int,
        client_id: int,
        event: str,
        template_data: Mapping[str, Any],
    ) -> tuple[bool, str]:
        self.calls.append("send_sms")
        self.sent_sms.append(
            {"reseller_id": reseller_id, "client_id": client_id, "event": event, "template": dict(template_data)}
        )
        return self.sms_outcome

    def ports(self) -> NotificationPorts:
        return NotificationPorts(
            lookup_entity=self.lookup_entity,
            render_phrase=self.render_phrase,
            reseller_email_from=self.reseller_email_from,
            permitted_emails=self.permitted_emails,
            send_messages=self.send_messages,
            send_sms=self.send_sms,
        )


class ReturnOperationTests(unittest.TestCase):
    def test_end_to_end_status_change_notifies_every_channel(self) -> None:
        fakes = FakeCollaborators()

        result = do_return_operation(make_request(), fakes.ports())

        self.assertEqual(
            result,
            {
                "notificationEmployeeByEmail": True,
                "notificationClientByEmail": True,
                "notificationClientBySms": {"isSent": True, "message": ""},
            },
        )
        recipients = [item["message"]["emailTo"] for item in fakes.sent_messages]
        self.assertEqual(
            recipients,
            [
                "warehouse@northwind.example.com",
                "support@northwind.example.com",
                "alice@example.com",
            ],
        )
        self.assertEqual(len(fakes.sent_sms), 1)
        self.assertEqual(fakes.sent_sms[0]["client_id"], 10)
        self.assertEqual(fakes.sent_sms[0]["event"], NotificationEvents.CHANGE_RETURN_STATUS)
        self.assertEqual(fakes.sent_sms[0]["template"]["DIFFERENCES"], "from Pending to Rejected")

    def test_employee_messages_share_rendered_subject_and_body(self) -> None:
        fakes = FakeCollaborators()

        do_return_operation(make_request(), fakes.ports())

        employee_messages = [item for item in fakes.sent_messages if item["client_id"] is None]
        self.assertEqual(len(employee_messages), 2)
        for item in employee_messages:
            self.assertEqual(item["message"]["emailFrom"], "returns@northwind.example.com")
            self.assertEqual(item["message"]["subject"], "complaintEmployeeEmailSubject#5")
            self.assertEqual(item["message"]["message"], "complaintEmployeeEmailBody#5")
            self.assertEqual(item["event"], NotificationEvents.CHANGE_RETURN_STATUS)
        self.assertIn(f"permits:5:{NotificationEvents.GOODS_RETURN_PERMIT}", fakes.calls)

    def test_client_email_carries_client_id(self) -> None:
        fakes = FakeCollaborators()

        do_return_operation(make_request(), fakes.ports())

        client_message = fakes.sent_messages[-1]
        self.assertEqual(client_message["client_id"], 10)
        self.assertEqual(client_message["message"]["subject"], "complaintClientEmailSubject#5")

    def test_completed_to_pending_renders_status_names(self) -> None:
        fakes = FakeCollaborators()

        result = do_return_operation(
            make_request(differences={"from": 0, "to": 1}), fakes.ports()
        )

        self.assertTrue(result["notificationClientByEmail"])
        self.assertEqual(fakes.sent_sms[0]["template"]["DIFFERENCES"], "from Completed to Pending")

    def test_new_notification_only_emails_employees(self) -> None:
        fakes = FakeCollaborators()

        result = do_return_operation(
            make_request(notificationType="1", differences={"from": 0, "to": 1}), fakes.ports()
        )

        self.assertTrue(result["notificationEmployeeByEmail"])
        self.assertFalse(result["notificationClientByEmail"])
        self.assertEqual(result["notificationClientBySms"], {"isSent": False, "message": ""})
        self.assertEqual(fakes.sent_sms, [])
        self.assertEqual(len(fakes.sent_messages), 2)
        self.assertEqual(fakes.sent_messages[0]["event"], NotificationEvents.CHANGE_RETURN_STATUS)
        self.assertIn(("NewPositionAdded", None, 5), fakes.phrase_calls)

    def test_missing_required_fields_call_no_collaborator(self) -> None:
        for missing in ("resellerId", "notificationType"):
            with self.subTest(missing=missing):
                fakes = FakeCollaborators()
                request = make_request()
                del request[missing]

                with self.assertRaises(InvalidInput):
                    do_return_operation(request, fakes.ports())

                self.assertEqual(fakes.calls, [])
                self.assertEqual(fakes.phrase_calls, [])

    def test_missing_entities_are_named(self) -> None:
        cases = [
            ("Seller", [CLIENT, CREATOR, EXPERT]),
            ("Client", [RESELLER, CREATOR, EXPERT]),
            ("Creator", [RESELLER, CLIENT, EXPERT]),
            ("Expert", [RESELLER, CLIENT, CREATOR]),
        ]
        for entity_name, entities in cases:
            with self.subTest(entity=entity_name):
                fakes = FakeCollaborators(entities=entities)

                with self.assertRaises(EntityNotFound) as exc:
                    do_return_operation(make_request(), fakes.ports())

                self.assertEqual(exc.exception.entity, entity_name)
                self.assertEqual(exc.exception.status_code, 400)
                self.assertNotIn("send_messages", fakes.calls)

    def test_client_of_other_reseller_is_not_found(self) -> None:
        foreign = Entity(id=10, kind=EntityKind.CONTRACTOR, name="Alice", seller_id=6)
        fakes = FakeCollaborators(entities=[RESELLER, foreign, CREATOR, EXPERT])

        with self.assertRaises(EntityNotFound) as exc:
            do_return_operation(make_request(), fakes.ports())

        self.assertEqual(str(exc.exception), "Client not found or does not belong to the reseller!")
        self.assertEqual(fakes.phrase_calls, [])

    def test_non_customer_client_is_not_found(self) -> None:
        supplier = Entity(id=10, kind=EntityKind.CONTRACTOR, name="Alice", type=1, seller_id=5)
        fakes = FakeCollaborators(entities=[RESELLER, supplier, CREATOR, EXPERT])

        with self.assertRaises(EntityNotFound):
            do_return_operation(make_request(), fakes.ports())

        self.assertEqual(fakes.phrase_calls, [])

    def test_change_without_differences_fails_before_sending(self) -> None:
        fakes = FakeCollaborators()

        with self.assertRaises(IncompleteTemplate) as exc:
            do_return_operation(make_request(differences={}), fakes.ports())

        self.assertEqual(exc.exception.key, "DIFFERENCES")
        self.assertEqual(exc.exception.status_code, 500)
        self.assertNotIn("send_messages", fakes.calls)
        self.assertNotIn("send_sms", fakes.calls)

    def test_incomplete_template_names_first_empty_field(self) -> None:
        fakes = FakeCollaborators()

        with self.assertRaises(IncompleteTemplate) as exc:
            do_return_operation(make_request(complaintNumber="  "), fakes.ports())

        self.assertEqual(exc.exception.key, "COMPLAINT_NUMBER")

    def test_repeated_calls_produce_identical_results(self) -> None:
        fakes = FakeCollaborators(sms_outcome=(False, "timeout"))
        ports = fakes.ports()

        first = do_return_operation(make_request(), ports)
        second = do_return_operation(make_request(), ports)

        self.assertEqual(first, second)
        self.assertIsNot(first, second)

    def test_sms_failure_does_not_flip_other_channels(self) -> None:
        fakes = FakeCollaborators(sms_outcome=(False, "timeout"))

        result = do_return_operation(make_request(), fakes.ports())

        self.assertTrue(result["notificationEmployeeByEmail"])
        self.assertTrue(result["notificationClientByEmail"])
        self.assertEqual(result["notificationClientBySms"], {"isSent": False, "message": "timeout"})

    def test_sms_warning_is_reported_even_when_sent(self) -> None:
        fakes = FakeCollaborators(sms_outcome=(True, "delivered late"))

        result = do_return_operation(make_request(), fakes.ports())

        self.assertEqual(
            result["notificationClientBySms"], {"isSent": True, "message": "delivered late"}
        )

    def test_sms_exception_is_absorbed(self) -> None:
        fakes = FakeCollaborators()

        def exploding_sms(**_kwargs: Any) -> tuple[bool, str]:
            raise RuntimeError("sms provider unavailable")

        ports = NotificationPorts(
            lookup_entity=fakes.lookup_entity,
            render_phrase=fakes.render_phrase,
            reseller_email_from=fakes.reseller_email_from,
            permitted_emails=fakes.permitted_emails,
            send_messages=fakes.send_messages,
            send_sms=exploding_sms,
        )

        result = do_return_operation(make_request(), ports)

        self.assertTrue(result["notificationClientByEmail"])
        self.assertFalse(result["notificationClientBySms"]["isSent"])
        self.assertEqual(result["notificationClientBySms"]["message"], "sms provider unavailable")

    def test_failing_recipient_does_not_block_the_rest(self) -> None:
        fakes = FakeCollaborators(failing_recipients={"warehouse@northwind.example.com"})

        result = do_return_operation(make_request(), fakes.ports())

        self.assertTrue(result["notificationEmployeeByEmail"])
        sent_to = [item["message"]["emailTo"] for item in fakes.sent_messages]
        self.assertIn("support@northwind.example.com", sent_to)
        self.assertTrue(result["notificationClientByEmail"])

    def test_every_recipient_failing_still_counts_as_attempted(self) -> None:
        fakes = FakeCollaborators(
            failing_recipients={"warehouse@northwind.example.com", "support@northwind.example.com"}
        )

        result = do_return_operation(make_request(), fakes.ports())

        self.assertTrue(result["notificationEmployeeByEmail"])
        self.assertEqual([item["client_id"] for item in fakes.sent_messages], [10])

    def test_client_subject_render_failure_keeps_other_channels(self) -> None:
        fakes = FakeCollaborators()

        def render_phrase(key: str, params: Mapping[str, Any] | None, reseller_id: int) -> str:
            if key == "complaintClientEmailSubject":
                raise RuntimeError("missing translation")
            return fakes.render_phrase(key, params, reseller_id)

        ports = replace(fakes.ports(), render_phrase=render_phrase)

        result = do_return_operation(make_request(), ports)

        self.assertTrue(result["notificationEmployeeByEmail"])
        self.assertFalse(result["notificationClientByEmail"])
        self.assertEqual(result["notificationClientBySms"], {"isSent": True, "message": ""})
        self.assertEqual(len(fakes.sent_messages), 2)
        self.assertEqual(len(fakes.sent_sms), 1)

    def test_permitted_emails_failure_keeps_client_channels(self) -> None:
        fakes = FakeCollaborators()

        def permitted_emails(reseller_id: int, event: str) -> list[str]:
            raise RuntimeError("permit store down")

        ports = replace(fakes.ports(), permitted_emails=permitted_emails)

        result = do_return_operation(make_request(), ports)

        self.assertFalse(result["notificationEmployeeByEmail"])
        self.assertTrue(result["notificationClientByEmail"])
        self.assertTrue(result["notificationClientBySms"]["isSent"])
        self.assertEqual(len(fakes.sent_sms), 1)

    def test_sender_lookup_failure_still_attempts_sms(self) -> None:
        fakes = FakeCollaborators()

        def reseller_email_from(reseller_id: int) -> str:
            raise RuntimeError("settings unavailable")

        ports = replace(fakes.ports(), reseller_email_from=reseller_email_from)

        result = do_return_operation(make_request(), ports)

        self.assertFalse(result["notificationEmployeeByEmail"])
        self.assertFalse(result["notificationClientByEmail"])
        self.assertTrue(result["notificationClientBySms"]["isSent"])
        self.assertEqual(fakes.sent_messages, [])

    def test_missing_sender_address_skips_all_email(self) -> None:
        fakes = FakeCollaborators(email_from="")

        result = do_return_operation(make_request(), fakes.ports())

        self.assertFalse(result["notificationEmployeeByEmail"])
        self.assertFalse(result["notificationClientByEmail"])
        self.assertTrue(result["notificationClientBySms"]["isSent"])
        self.assertEqual(fakes.sent_messages, [])

    def test_no_permitted_recipients_skips_employee_email(self) -> None:
        fakes = FakeCollaborators(recipients=[])

        result = do_return_operation(make_request(), fakes.ports())

        self.assertFalse(result["notificationEmployeeByEmail"])
        self.assertTrue(result["notificationClientByEmail"])

    def test_client_without_contacts_gets_nothing(self) -> None:
        quiet = Entity(id=10, kind=EntityKind.CONTRACTOR, name="Alice", seller_id=5)
        fakes = FakeCollaborators(entities=[RESELLER, quiet, CREATOR, EXPERT])

        result = do_return_operation(make_request(), fakes.ports())

        self.assertTrue(result["notificationEmployeeByEmail"])
        self.assertFalse(result["notificationClientByEmail"])
        self.assertEqual(result["notificationClientBySms"], {"isSent": False, "message": ""})
        self.assertNotIn("send_sms", fakes.calls)


class DispatchGuardTests(unittest.TestCase):
    def dispatch(self, request: dict[str, Any], fakes: FakeCollaborators) -> dict[str, Any]:
        result = new_notification_result()
        dispatch_notifications(
            request,
            notification_type=request["notificationType"],
            reseller_id=5,
            client=CLIENT,
            template_data={"COMPLAINT_NUMBER": "CR-301", "DIFFERENCES": "x"},
            result=result,
            ports=fakes.ports(),
        )
        return result

    def test_client_channels_follow_normalized_differences_to(self) -> None:
        fakes = FakeCollaborators()

        result = self.dispatch(make_request(differences={"from": 1, "to": 2}), fakes)

        self.assertTrue(result["notificationClientByEmail"])
        self.assertTrue(result["notificationClientBySms"]["isSent"])

    def test_empty_target_status_skips_client_channels(self) -> None:
        for differences in ({"from": 1}, {"from": 1, "to": ""}, {"from": 1, "to": 0}, "2"):
            with self.subTest(differences=differences):
                fakes = FakeCollaborators()

                result = self.dispatch(make_request(differences=differences), fakes)

                self.assertTrue(result["notificationEmployeeByEmail"])
                self.assertFalse(result["notificationClientByEmail"])
                self.assertNotIn("send_sms", fakes.calls)

    def test_employee_email_runs_before_client_channels(self) -> None:
        fakes = FakeCollaborators()

        self.dispatch(make_request(), fakes)

        sends = [call for call in fakes.calls if call.startswith("send_")]
        self.assertEqual(sends, ["send_messages", "send_messages", "send_messages", "send_sms"])

    def test_returns_channel_results(self) -> None:
        fakes = FakeCollaborators(sms_outcome=(False, "timeout"))
        request = make_request()

        channel_results = dispatch_notifications(
            request,
            notification_type=2,
            reseller_id=5,
            client=CLIENT,
            template_data={"COMPLAINT_NUMBER": "CR-301"},
            result=new_notification_result(),
            ports=fakes.ports(),
        )

        self.assertEqual(
            [item["channel"] for item in channel_results],
            ["employee_email", "client_email", "client_sms"],
        )
        self.assertEqual(channel_results[0]["sent"], 2)
        self.assertEqual(channel_results[2]["error"], "timeout")

    def test_collaborator_failures_are_recorded_per_channel(self) -> None:
        fakes = FakeCollaborators()

        def permitted_emails(reseller_id: int, event: str) -> list[str]:
            raise RuntimeError("permit store down")

        def render_phrase(key: str, params: Mapping[str, Any] | None, reseller_id: int) -> str:
            if key == "complaintClientEmailSubject":
                raise RuntimeError("missing translation")
            return fakes.render_phrase(key, params, reseller_id)

        channel_results = dispatch_notifications(
            make_request(),
            notification_type=2,
            reseller_id=5,
            client=CLIENT,
            template_data={"COMPLAINT_NUMBER": "CR-301"},
            result=new_notification_result(),
            ports=replace(fakes.ports(), permitted_emails=permitted_emails, render_phrase=render_phrase),
        )

        employee, client_email, sms = channel_results
        self.assertEqual(
            employee,
            {"channel": "employee_email", "requested": True, "success": False, "error": "permit store down"},
        )
        self.assertEqual(
            client_email,
            {"channel": "client_email", "requested": True, "success": False, "error": "missing translation"},
        )
        self.assertTrue(sms["success"])

    def test_failed_recipients_are_listed_in_the_error(self) -> None:
        fakes = FakeCollaborators(failing_recipients={"warehouse@northwind.example.com"})

        employee = self.dispatch_channels(fakes)[0]

        self.assertTrue(employee["success"])
        self.assertEqual(employee["sent"], 1)
        self.assertEqual(
            employee["error"],
            "warehouse@northwind.example.com: mailbox warehouse@northwind.example.com rejected",
        )

    def dispatch_channels(self, fakes: FakeCollaborators) -> list[dict[str, Any]]:
        return dispatch_notifications(
            make_request(),
            notification_type=2,
            reseller_id=5,
            client=CLIENT,
            template_data={"COMPLAINT_NUMBER": "CR-301"},
            result=new_notification_result(),
            ports=fakes.ports(),
        )


if __name__ == "__main__":
    unittest.main()
