from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import argparse
import asyncio
import json
import logging
import sys

from hoshin_compass.config import HoshinConfig, load_config
from hoshin_compass.editing import (
    clear_connection_direction,
    compose_prompt_question,
    set_connection_direction,
    set_initial_order,
    set_prompt_question,
    set_statement_text,
)
from hoshin_compass.export.vbrief import write_vbrief
from hoshin_compass.models import STATEMENT_IDS, to_connection_pair_id
from hoshin_compass.report import render_document_txt, render_ranking_txt, render_validation_txt
from hoshin_compass.session import HoshinSession
from hoshin_compass.storage.json_store import JsonDirectoryHoshinRepository
from hoshin_compass.storage.repository import RepositoryError
from hoshin_compass.wizard import WIZARD_MODES, WizardSequencer

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="hoshin",
        description="Hoshin Success Compass: fill, validate and rank a five-statement Hoshin."
    )
    ap.add_argument("--store", default=None, help="Directory holding Hoshin documents (default: config / HOSHIN_STORE_DIR / ~/.hoshin)")
    ap.add_argument("--config", default=None, help="Path to a YAML config file")
    ap.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")

    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("new", help="Create an empty Hoshin")
    p.add_argument("--name", default="", help="Display name (default: next free 'Hoshin N')")

    sub.add_parser("list", help="List Hoshins, most recent first")

    p = sub.add_parser("show", help="Print a Hoshin")
    p.add_argument("id", help="Document id or unique id prefix")

    p = sub.add_parser("statement", help="Edit one statement card")
    p.add_argument("id")
    p.add_argument("slot", choices=STATEMENT_IDS)
    p.add_argument("--text", default=None, help="Statement text, e.g. 'I/We must ...'")
    p.add_argument("--order", type=int, default=None, help="Initial order 1-5 (picking the current order clears it)")

    p = sub.add_parser("prompt", help="Fill in the prompt question blank")
    p.add_argument("id")
    p.add_argument("blank", help="Text completing 'What are the key issues ... for me/us to ___?'")

    for name, help_text in (("link", "Set a direction FROM enables TO"), ("unlink", "Clear the direction of a pair")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("id")
        p.add_argument("source", choices=STATEMENT_IDS)
        p.add_argument("target", choices=STATEMENT_IDS)

    p = sub.add_parser("validate", help="Check authoring rules (exit status 1 when invalid)")
    p.add_argument("id")
    p.add_argument("--wizard", action="store_true", help="Only the checks required to run the wizard")

    p = sub.add_parser("rank", help="Calculate the priority ranking")
    p.add_argument("id")

    p = sub.add_parser("wizard", help="Answer the pairwise questions interactively")
    p.add_argument("id")
    p.add_argument("--mode", choices=WIZARD_MODES, default=None)

    p = sub.add_parser("export", help="Write the vBRIEF export file")
    p.add_argument("id")
    p.add_argument("--out", default=".", help="Output directory")

    p = sub.add_parser("delete", help="Delete a Hoshin")
    p.add_argument("id")
    p.add_argument("--confirm", default="", help="Must be DELETE")
    return ap


async def _open(session: HoshinSession, id_or_prefix: str) -> None:
    await session.load()
    await session.select(session.find_document_id(id_or_prefix), save_current=False)


async def _run_wizard(session: HoshinSession, mode: Optional[str]) -> dict:
    wizard: WizardSequencer = session.start_wizard(mode)
    if wizard.total == 0:
        print("All connection directions are already set. You can run rank.")
        return {"completed": True, "answered": 0}

    answered = 0
    while not wizard.is_complete:
        step = wizard.current_step
        a, b = step.pair
        texts = {s.id: s.text for s in wizard.document.statements}
        print(f"\n{wizard.progress_label}: which statement best enables or makes the other easier to do?")
        print(f"  1) {a} enables {b}    [{a}] {texts.get(a, '')}")
        print(f"  2) {b} enables {a}    [{b}] {texts.get(b, '')}")
        if not step.requires_choice:
            print(f"  n) keep {step.direction.from_id} -> {step.direction.to_id}")
        print("  q) back to editor (save progress)")
        choice = input("> ").strip().lower()
        if choice == "1":
            await wizard.answer(a, b)
            answered += 1
        elif choice == "2":
            await wizard.answer(b, a)
            answered += 1
        elif choice == "n" and not step.requires_choice:
            await wizard.next()
        elif choice == "q":
            document = await wizard.back_to_editor()
            session.finish_wizard(document)
            return {"completed": False, "answered": answered, "progress": wizard.progress_label}
        else:
            print("Please answer 1, 2" + (", n" if not step.requires_choice else "") + " or q.")
    session.finish_wizard(wizard.document)
    return {"completed": True, "answered": answered}


async def _dispatch(args: argparse.Namespace, cfg: HoshinConfig) -> int:
    session = HoshinSession(JsonDirectoryHoshinRepository(cfg.store_dir), wizard_mode=cfg.wizard_mode)
    logger.debug(f"Running {args.command} against {cfg.store_dir}")

    if args.command == "new":
        await session.load()
        document = await session.create(args.name)
        print(json.dumps({"id": document.id, "name": document.name}, indent=2))
        return 0

    if args.command == "list":
        await session.load()
        for d in session.documents:
            print(f"{d.id}  {d.updated_at}  {d.name}")
        return 0

    await _open(session, args.id)

    if args.command == "show":
        print(render_document_txt(session.document))
        return 0

    if args.command == "statement":
        slot = args.slot
        if args.text is not None:
            session.apply(lambda d: set_statement_text(d, slot, args.text))
        if args.order is not None:
            session.apply(lambda d: set_initial_order(d, slot, args.order))
        await session.save()
        print(render_document_txt(session.document))
        return 0

    if args.command == "prompt":
        prompt_question = compose_prompt_question(args.blank.strip())
        session.apply(lambda d: set_prompt_question(d, prompt_question))
        await session.save()
        print(session.document.prompt_question)
        return 0

    if args.command in ("link", "unlink"):
        pair_id = to_connection_pair_id(args.source, args.target)
        if args.command == "link":
            session.apply(lambda d: set_connection_direction(d, pair_id, args.source, args.target))
        else:
            session.apply(lambda d: clear_connection_direction(d, pair_id))
        await session.save()
        print(render_document_txt(session.document))
        return 0

    if args.command == "validate":
        if args.wizard:
            result = session.wizard_validation
            print(render_validation_txt(session.document, result, label="Wizard readiness"))
        else:
            result = session.validation
            print(render_validation_txt(session.document, result))
        return 0 if result.is_valid else 1

    if args.command == "rank":
        print(render_ranking_txt(session.calculate()))
        return 0

    if args.command == "wizard":
        outcome = await _run_wizard(session, args.mode)
        print(json.dumps(outcome, indent=2))
        return 0

    if args.command == "export":
        filename, payload = session.export()
        out = Path(args.out)
        out.mkdir(parents=True, exist_ok=True)
        dest = out / filename
        write_vbrief(str(dest), payload)
        print(json.dumps({"file": str(dest), "focus": list(session.calculate().focus_top_two)}, indent=2))
        return 0

    if args.command == "delete":
        if args.confirm != "DELETE":
            print("Refusing to delete without --confirm DELETE", file=sys.stderr)
            return 2
        deleted_id = session.document.id
        await session.delete()
        print(json.dumps({"deleted": deleted_id}, indent=2))
        return 0

    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 2


def main(argv: Optional[List[str]] = None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    if args.store:
        cfg.store_dir = args.store
    if args.log_level:
        cfg.log_level = args.log_level.upper()
    logging.basicConfig(level=getattr(logging, cfg.log_level, logging.WARNING), format="%(levelname)s %(name)s: %(message)s")

    try:
        return asyncio.run(_dispatch(args, cfg))
    except KeyError as e:
        print(f"error: no unique Hoshin or slot matches {e.args[0]!r}", file=sys.stderr)
        return 2
    except (ValueError, RepositoryError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
