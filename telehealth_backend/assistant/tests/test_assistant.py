"""Tests for the assistant chat endpoint and context building."""

from __future__ import annotations

from unittest import mock

from django.test import TestCase, override_settings

from telehealth_backend.assistant import context, services
from telehealth_backend.assistant.models import Conversation
from telehealth_backend.assistant.prompts import NO_PATIENT_DATA, PATIENT_PROMPT
from telehealth_backend.core.exceptions import IntegrationError
from telehealth_backend.core.models import AuditLog, RateLimit
from telehealth_backend.core.tests.helpers import client_for, make_user
from telehealth_backend.intake import services as intake_services
from telehealth_backend.patients.models import Patient

CHAT = "telehealth_backend.integrations.llm.chat"


class ContextTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.user = make_user("ctx_patient", "patient")

    def test_patient_without_data(self):
        self.assertEqual(context.build_context(self.user, "patient"), NO_PATIENT_DATA)

    def test_patient_context_uses_latest_intake(self):
        Patient.objects.create(user=self.user, email=self.user.email, allergies=["latex"])
        intake = intake_services.create_intake(email=self.user.email, chief_complaint="Migraine")
        intake_services.record_step(intake, "severity", 6)

        text = context.build_context(self.user, "patient")
        self.assertIn("Allergies: latex", text)
        self.assertIn("Chief complaint: Migraine", text)
        self.assertIn("Severity: 6/10", text)

    def test_staff_contexts(self):
        nurse = make_user("ctx_nurse", "nurse")
        self.assertEqual(context.build_context(nurse, "nurse"), "No provider profile on file.")
        admin_text = context.build_context(make_user("ctx_admin", "admin"), "admin")
        self.assertIn("Patients on file: 0", admin_text)


@override_settings(LLM_API_KEY="test-key", LLM_MODEL="test-model")
class AssistantChatTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.user = make_user("chat_patient", "patient")
        self.client = client_for(self.user)

    @override_settings(LLM_API_KEY="")
    def test_not_configured(self):
        response = self.client.post("/api/assistant/chat/", {"message": "hi"}, format="json")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.data["code"], "integration_not_configured")
        self.assertFalse(Conversation.objects.exists())

    @mock.patch(CHAT, return_value="Drink plenty of fluids.")
    def test_chat_stores_both_turns(self, chat):
        response = self.client.post(
            "/api/assistant/chat/", {"message": "I have a cold", "page": "/intake"}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["reply"], "Drink plenty of fluids.")
        self.assertEqual(response.data["model"], "test-model")

        conversation = Conversation.objects.get()
        self.assertEqual([m["role"] for m in conversation.messages], ["user", "assistant"])
        self.assertEqual(conversation.current_page, "/intake")
        self.assertEqual(conversation.user_role, "patient")

        sent = chat.call_args.args[0]
        self.assertEqual(sent[0]["role"], "system")
        self.assertTrue(sent[0]["content"].startswith(PATIENT_PROMPT))
        self.assertEqual(sent[-1], {"role": "user", "content": "I have a cold"})

        audit = AuditLog.objects.get(action="assistant_message")
        self.assertEqual(audit.entity_id, str(conversation.id))
        self.assertEqual(audit.changes, {"page": "/intake", "model": "test-model"})

    @mock.patch(CHAT, return_value="ok")
    def test_history_is_capped(self, chat):
        conversation = services.get_or_create_conversation(self.user)
        conversation.messages = [
            {"role": "user" if i % 2 == 0 else "assistant", "content": str(i)} for i in range(30)
        ]
        conversation.save()

        self.client.post("/api/assistant/chat/", {"message": "next"}, format="json")
        sent = chat.call_args.args[0]
        # system + 20 history + new message
        self.assertEqual(len(sent), 22)
        self.assertEqual(sent[1]["content"], "10")

    @mock.patch(CHAT)
    def test_failed_reply_is_not_stored(self, chat):
        chat.side_effect = IntegrationError("llm", "llm API error: 500")
        response = self.client.post("/api/assistant/chat/", {"message": "hello"}, format="json")
        self.assertEqual(response.status_code, 502)
        self.assertEqual(Conversation.objects.get().messages, [])

    @mock.patch(CHAT, return_value="ok")
    def test_foreign_intake_is_ignored(self, chat):
        foreign = intake_services.create_intake(email="other@example.com")
        self.client.post("/api/assistant/chat/", {"message": "hi", "intake": foreign.id}, format="json")
        self.assertIsNone(Conversation.objects.get().intake)

    @mock.patch(CHAT, return_value="ok")
    def test_rate_limited_after_twenty(self, chat):
        for _ in range(20):
            self.assertEqual(
                self.client.post("/api/assistant/chat/", {"message": "hi"}, format="json").status_code, 200,
            )
        response = self.client.post("/api/assistant/chat/", {"message": "hi"}, format="json")
        self.assertEqual(response.status_code, 429)
        self.assertEqual(chat.call_count, 20)
        self.assertEqual(RateLimit.objects.get().key, f"assistant_chat:user:{self.user.id}")

    def test_requires_a_role(self):
        response = client_for(make_user("chat_nobody", None)).post(
            "/api/assistant/chat/", {"message": "hi"}, format="json",
        )
        self.assertEqual(response.status_code, 403)


class ConversationEndpointTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.user = make_user("conv_patient", "patient")
        self.client = client_for(self.user)

    def test_empty(self):
        response = self.client.get("/api/assistant/conversation/")
        self.assertEqual(response.data, {"messages": []})

    def test_get_and_delete(self):
        conversation = services.get_or_create_conversation(self.user)
        response = self.client.get("/api/assistant/conversation/")
        self.assertEqual(response.data["id"], conversation.id)

        self.assertEqual(self.client.delete("/api/assistant/conversation/").status_code, 204)
        self.assertFalse(Conversation.objects.exists())
        self.assertEqual(AuditLog.objects.get(action="conversation_cleared").changes, {"deleted": 1})
