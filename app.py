"""
Hoshin Success Compass - Streamlit editor

Fill in five statements, set the ten link directions, then calculate the
ranking and download the vBRIEF export.
Run with: streamlit run app.py
"""
import asyncio
import json
import logging

import streamlit as st

from hoshin_compass.config import load_config
from hoshin_compass.editing import (
    extract_prompt_blank,
    rename_document,
    set_connection_direction,
    set_initial_order,
    set_prompt_blank,
    set_statement_text,
)
from hoshin_compass.models import FIXED_CONNECTION_PAIRS, to_connection_pair_id
from hoshin_compass.ranking import RankingError
from hoshin_compass.export.vbrief import VbriefExportError
from hoshin_compass.session import HoshinSession
from hoshin_compass.storage.json_store import JsonDirectoryHoshinRepository
from hoshin_compass.storage.repository import RepositoryError
from hoshin_compass.validation import can_calculate, can_run_wizard

st.set_page_config(
    page_title="Hoshin Success Compass",
    page_icon="🧭",
    layout="centered",
)

cfg = load_config()
logging.basicConfig(level=getattr(logging, cfg.log_level, logging.WARNING))


def _session() -> HoshinSession:
    if "hoshin_session" not in st.session_state:
        session = HoshinSession(JsonDirectoryHoshinRepository(cfg.store_dir), wizard_mode=cfg.wizard_mode)
        try:
            asyncio.run(session.load())
        except RepositoryError as e:
            st.error(f"Could not load Hoshins from {cfg.store_dir}: {e}")
            st.stop()
        st.session_state.hoshin_session = session
    return st.session_state.hoshin_session


def _persist(session: HoshinSession) -> None:
    try:
        asyncio.run(session.save())
    except RepositoryError as e:
        st.error(f"Autosave failed: {e}")


session = _session()

st.title("🧭 Hoshin Success Compass")
st.markdown("Identify and prioritize the key issues that must be addressed to reach your goal.")

# --- Hoshin picker ---
if session.document is None:
    st.info("Welcome! Create your first Hoshin to get started.")
    first_name = st.text_input("Name your first Hoshin", placeholder="e.g., Q1 Strategic Priorities")
    if st.button("Let's go!", type="primary"):
        asyncio.run(session.create(first_name or "My First Hoshin"))
        st.rerun()
    st.stop()

labels = {d.id: d.name for d in session.documents}
selected = st.selectbox(
    "Hoshin",
    options=list(labels),
    index=list(labels).index(session.document.id) if session.document.id in labels else 0,
    format_func=lambda i: labels[i],
)
if selected != session.document.id:
    asyncio.run(session.select(selected))
    st.rerun()

col_new, col_undo, col_redo = st.columns(3)
with col_new:
    if st.button("New Hoshin", use_container_width=True):
        asyncio.run(session.create())
        st.rerun()
with col_undo:
    if st.button("Undo", disabled=not session.can_undo, use_container_width=True):
        session.undo()
        _persist(session)
        st.rerun()
with col_redo:
    if st.button("Redo", disabled=not session.can_redo, use_container_width=True):
        session.redo()
        _persist(session)
        st.rerun()

document = session.document
changed = False

# --- Name and prompt ---
st.markdown("---")
name = st.text_input("Name", value=document.name)
changed |= session.apply(lambda d: rename_document(d, name))
blank = st.text_input(
    "What are the key issues that must be addressed in order for me/us to ...?",
    value=extract_prompt_blank(document.prompt_question),
)
changed |= session.apply(lambda d: set_prompt_blank(d, blank))

# --- Statements ---
st.markdown("### Statements")
for statement in document.statements:
    text = st.text_area(f"{statement.id.upper()}", value=statement.text, placeholder="I/We must ...")
    changed |= session.apply(lambda d, sid=statement.id, t=text: set_statement_text(d, sid, t))
    order = st.radio(
        f"Initial order for {statement.id.upper()}",
        options=[None, 1, 2, 3, 4, 5],
        index=[None, 1, 2, 3, 4, 5].index(statement.initial_order) if statement.initial_order in (1, 2, 3, 4, 5) else 0,
        format_func=lambda o: "-" if o is None else str(o),
        horizontal=True,
        key=f"order-{statement.id}-{statement.initial_order}",
    )
    if order != statement.initial_order:
        changed |= session.apply(lambda d, sid=statement.id, o=order: set_initial_order(d, sid, o))

# --- Links ---
st.markdown("### Links")
st.caption("For each pair: which statement best enables or makes the other easier to do?")
for a, b in FIXED_CONNECTION_PAIRS:
    pair_id = to_connection_pair_id(a, b)
    connection = document.connection_by_id(pair_id)
    if connection is None:
        continue
    options = [None, (a, b), (b, a)]
    current = (connection.direction.from_id, connection.direction.to_id) if connection.direction else None
    choice = st.radio(
        pair_id.upper(),
        options=options,
        index=options.index(current) if current in options else 0,
        format_func=lambda o: "not set" if o is None else f"{o[0]} enables {o[1]}",
        horizontal=True,
        key=f"link-{pair_id}-{current}",
    )
    if choice is not None and choice != current:
        changed |= session.apply(lambda d, p=pair_id, c=choice: set_connection_direction(d, p, c[0], c[1]))

if changed:
    _persist(session)
    st.rerun()

# --- Validation, ranking, export ---
st.markdown("---")
document = session.document
validation = session.validation
if not can_run_wizard(document):
    st.caption("Complete all 5 statements and set order 1-5 before setting links.")
if validation.is_valid:
    st.success("All authoring rules pass.")
else:
    st.warning(f"Action blocked: {validation.issues[0].message}")
    with st.expander(f"{len(validation.issues)} issue(s)", expanded=False):
        for issue in validation.issues[:12]:
            st.markdown(f"- **{issue.path}**: {issue.message}")

if st.button("Calculate ranking", type="primary", disabled=not can_calculate(document)):
    try:
        result = session.calculate()
        for row in result.ranking:
            focus = " ⭐" if row.statement_id in result.focus_top_two else ""
            st.markdown(f"**#{row.rank}** {row.statement_id.upper()} ({row.arrows_out} out){focus}: {row.statement_text}")
    except RankingError as e:
        st.error(str(e))

if can_calculate(document):
    try:
        filename, payload = session.export()
        st.download_button(
            "Download vBRIEF",
            data=json.dumps(payload, ensure_ascii=False, indent=2),
            file_name=filename,
            mime="application/json",
        )
    except VbriefExportError as e:
        st.error(str(e))
