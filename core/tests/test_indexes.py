from django.test import SimpleTestCase

from core.exceptions import BackendPreconditionError
from core.indexes import find_covering_index, require_index
from jobs.models import Application


class IndexGuardTestCase(SimpleTestCase):
    def test_every_supported_filter_combination_is_covered(self):
        for filters in ([], ["status"], ["job_title"], ["status", "job_title"], ["job_title", "status"]):
            self.assertIsNotNone(find_covering_index(Application, filters, "-submitted_at"), filters)

    def test_uncovered_combination_fails_fast(self):
        with self.assertRaises(BackendPreconditionError) as ctx:
            require_index(Application, ["user_email"], "-submitted_at")

        # Operator detail names the index to create; the user message stays generic
        self.assertIn("user_email", ctx.exception.operator_detail)
        self.assertEqual(ctx.exception.message, "Something went wrong. Please try again later.")

    def test_order_field_must_be_last(self):
        self.assertIsNone(find_covering_index(Application, ["status"], "full_name"))
