import unittest

from release_notes_helper.parsing.commit_parser import ClassifiedCommit, classify, normalize


class TestCommitParser(unittest.TestCase):
    def test_conventional_headers(self) -> None:
        cases = [
            ("feat: add login", ("feat", "", "add login", False, None, None)),
            ("fix(api): handle 404", ("fix", "api", "handle 404", False, None, None)),
            ("feat(core)!: drop python 3.7", ("feat", "core", "drop python 3.7", True, None, None)),
            ("refactor!: rename module", ("refactor", "", "rename module", True, None, None)),
            ("docs: update readme (#42)", ("docs", "", "update readme", False, None, 42)),
            ("chore: bump deps [ignore]", ("chore", "", "bump deps", False, "ignore", None)),
            ("fix: typo [skip] (#7)", ("fix", "", "typo", False, "skip", 7)),
            ("fix: typo (#7) [skip]", ("fix", "", "typo", False, "skip", 7)),
        ]
        for message, (type_, scope, description, breaking, flag, pr) in cases:
            with self.subTest(message=message):
                result = classify(message)
                self.assertIsNotNone(result)
                self.assertEqual(result.type, type_)
                self.assertEqual(result.scope, scope)
                self.assertEqual(result.description, description)
                self.assertEqual(result.breaking, breaking)
                self.assertEqual(result.flag, flag)
                self.assertEqual(result.pr, pr)
                self.assertTrue(result.eligible)

    def test_description_is_normalized(self) -> None:
        result = classify("feat(ui):   add    dark   mode   ")
        self.assertEqual(result.description, "add dark mode")

    def test_only_subject_line_is_parsed(self) -> None:
        result = classify("fix: crash on start\n\nLong body: with colons (#99)")
        self.assertEqual(result.description, "crash on start")
        self.assertIsNone(result.pr)

    def test_missing_description_is_invalid(self) -> None:
        for message in ["", "   ", "feat:", "feat(core): ", "fix: [ignore]", "fix: (#3)", "\nfeat: body only"]:
            with self.subTest(message=message):
                self.assertIsNone(classify(message))

    def test_non_string_input_is_invalid(self) -> None:
        self.assertIsNone(classify(None))
        self.assertIsNone(classify(42))

    def test_plain_subject_has_no_type(self) -> None:
        result = classify("Update the installer")
        self.assertEqual(result, ClassifiedCommit(type="", scope="", description="Update the installer"))

    def test_merge_commits_are_not_eligible(self) -> None:
        for message in [
            "Merge pull request #12 from acme/feature",
            "Merge branch 'main' into develop",
            "feat: sync release into main",
            "chore: see https://github.com/acme/widgets/pull/3",
        ]:
            with self.subTest(message=message):
                result = classify(message)
                self.assertTrue(result.merge)
                self.assertFalse(result.eligible)

    def test_revert_commits_are_not_eligible(self) -> None:
        for message in ['Revert "feat: add login"', "revert: feat: add login"]:
            with self.subTest(message=message):
                result = classify(message)
                self.assertTrue(result.revert)
                self.assertFalse(result.eligible)

    def test_ignore_flag_is_normalized(self) -> None:
        result = classify("feat: thing [ ignore ]")
        self.assertEqual(result.flag, "ignore")
        self.assertTrue(result.ignored)

    def test_normalize(self) -> None:
        self.assertIsNone(normalize(None))
        self.assertEqual(normalize("  a   b  c "), "a b c")


if __name__ == "__main__":
    unittest.main()
