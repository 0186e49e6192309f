# application/services/form_scraper.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from application.ports.logger import LoggerPort, NullLogger
from application.ports.node_query import NodeQuery
from domain.args import DEFAULT_ENCODING, Arg, Args

FORM_CONTROL_TAGS = ("input", "select", "textarea", "button")


@dataclass
class ScrapedForm:
    args: Args
    action: str = ""


class FormScraper:
    """
    Recover the submittable controls of a <form> as an Args collection.

    - controls: input / select / textarea / button, in document order
    - controls without a name are skipped (nothing to submit them as)
    - value: the control's `value` attribute, "" when absent
    - <select>: options keyed by trimmed option text, valued by option `value`
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING, logger: Optional[LoggerPort] = None):
        self._encoding = encoding
        self._logger = logger or NullLogger()

    def extract_options(self, select_node: NodeQuery) -> Dict[str, str]:
        options: Dict[str, str] = {}
        for option in select_node.descendants(("option",)):
            text = option.text.strip()
            # duplicate labels: first one wins
            options.setdefault(text, option.get("value", ""))
        return options

    def extract_fields(self, form_node: NodeQuery) -> ScrapedForm:
        args = Args(encoding=self._encoding)
        action = form_node.get("action", "")

        for control in form_node.descendants(FORM_CONTROL_TAGS):
            name = control.get("name", "")
            if not name:
                continue

            arg = Arg.from_text(name, control.get("value", ""), self._encoding)
            if control.tag == "select":
                arg.options = self.extract_options(control)
            args.append(arg)

        self._logger.debug(
            "form.extracted",
            action=action,
            count=len(args),
            names_preview=args.names()[:10],
        )
        return ScrapedForm(args=args, action=action)

    def find_form(self, root: NodeQuery, query: str) -> Optional[ScrapedForm]:
        """None when nothing matches `query`; absence is not an error."""
        node = root.select_one(query)
        if node is None:
            self._logger.warning("form.not_found", query=query)
            return None
        return self.extract_fields(node)
