"""Unit tests for catan_rules/log.py."""

import logging
import unittest

import catan_rules.log
import catan_rules.settings


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name='catan_rules.engine.processor',
        level=logging.DEBUG,
        pathname='',
        lineno=0,
        msg='Rejected %s',
        args=('roll_dice',),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


class TestRejectedMoveFilter(unittest.TestCase):
    """Tests for the RejectedMoveFilter logging filter."""

    def test_rejection_filtered(self) -> None:
        """Records tagged as rejected moves are suppressed."""
        f = catan_rules.log.RejectedMoveFilter()
        self.assertFalse(f.filter(_record(rejected_move=True)))

    def test_other_records_pass(self) -> None:
        """Untagged records pass through."""
        f = catan_rules.log.RejectedMoveFilter()
        self.assertTrue(f.filter(_record()))


class TestConfigureLogging(unittest.TestCase):
    """Tests for configure_logging()."""

    def setUp(self) -> None:
        self.package = logging.getLogger('catan_rules')
        self.processor = logging.getLogger('catan_rules.engine.processor')
        self._level = self.package.level
        self._filters = list(self.processor.filters)

    def tearDown(self) -> None:
        self.package.setLevel(self._level)
        self.processor.filters = self._filters

    def test_sets_package_level(self) -> None:
        """configure_logging() applies the configured level to the package."""
        catan_rules.log.configure_logging()
        self.assertEqual(
            self.package.level, logging.getLevelName(catan_rules.settings.LOG_LEVEL)
        )
        self.assertEqual(self.processor.filters, self._filters)

    def test_quiet_rejections_installs_filter_once(self) -> None:
        """The filter lands on the processor logger and is not duplicated."""
        catan_rules.log.configure_logging(quiet_rejections=True)
        catan_rules.log.configure_logging(quiet_rejections=True)
        installed = [
            f
            for f in self.processor.filters
            if isinstance(f, catan_rules.log.RejectedMoveFilter)
        ]
        self.assertEqual(len(installed), 1)


if __name__ == '__main__':
    unittest.main()
