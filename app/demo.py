"""
No-guess Minesweeper - Interactive Demo

Run with: streamlit run app/demo.py
"""

import random
from typing import Any, Dict, List, Optional, Set, Tuple

import streamlit as st

from noguess import (
    GameState,
    GenerationBudgetExceeded,
    GenerationStrategy,
    Grid,
    Solver,
    create_grid,
    generate_board,
)
from noguess.config import BORDER_OPTIMIZATION_THRESHOLD, DIFFICULTY_LEVELS

COLORS = {
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}


def snapshot(grid: Grid) -> List[List[str]]:
    """Visible state of every cell: '.', 'F', or the open cell's hint."""
    return [
        ["F" if c.is_flagged else str(c.hint) if c.is_open else "." for c in row]
        for row in grid.cells
    ]


def render_board(
    grid: Grid,
    view: List[List[str]],
    show_mines: bool = False,
    changed: Optional[Set[Tuple[int, int]]] = None,
) -> str:
    """Render a snapshot of the grid as an HTML table."""
    if grid.width >= 30:
        cell_size, font_size = 14, "10px"
    elif grid.width >= 16:
        cell_size, font_size = 20, "13px"
    else:
        cell_size, font_size = 26, "15px"

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for z in range(grid.height):
        html += "<tr>"
        for x in range(grid.width):
            value = view[z][x]
            if value == "F":
                cell, bg, text_color = "F", "#ffa500", "#ffffff"
            elif value != ".":
                cell = value
                bg = "#f0f0f0" if cell == "0" else "#ffffff"
                text_color = COLORS.get(cell, "#000000")
            elif show_mines and grid.cell(x, z).mine:
                cell, bg, text_color = "M", "#ffcccc", "#ff0000"
            else:
                cell, bg, text_color = ".", "#c0c0c0", "#666666"

            border = "2px solid #ff0000" if changed and (x, z) in changed else "1px solid #999"
            display = cell if cell != "0" else " "

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def run_solver(grid: Grid, start: Tuple[int, int], threshold: int) -> Dict[str, Any]:
    """Open the start cell and solve, recording a snapshot after every step."""
    grid.reset_reveal_states()
    grid.reveal(*start)
    solver = Solver(grid, threshold)

    history = [{"phase": "start", "progressed": True, "view": snapshot(grid)}]
    while True:
        phase = solver.state.phase.value
        progressed, terminal = solver.step()
        history.append({"phase": phase, "progressed": progressed, "view": snapshot(grid)})
        if terminal is not None:
            break

    return {"history": history, "result": terminal, "solver": solver}


def main():
    st.set_page_config(page_title="No-guess Minesweeper", page_icon="💣", layout="wide")

    st.title("No-guess Minesweeper")
    st.markdown("Boards are regenerated until the solver can finish them from the start cell.")

    st.sidebar.header("Board Configuration")

    presets = [f"{name.title()} ({w}x{h}, {m})" for name, (w, h, m) in DIFFICULTY_LEVELS.items()]
    preset = st.sidebar.selectbox("Difficulty Preset", presets + ["Custom"])

    if preset == "Custom":
        width = st.sidebar.slider("Width", 5, 30, 16)
        height = st.sidebar.slider("Height", 5, 30, 16)
        max_mines = width * height - 9
        mines = st.sidebar.slider("Mines", 1, max_mines, min(40, max_mines))
    else:
        width, height, mines = list(DIFFICULTY_LEVELS.values())[presets.index(preset)]

    strategy = st.sidebar.selectbox(
        "Mine Generation",
        [s.value for s in GenerationStrategy],
        index=2,
        help="safe_first_action_rule: only the start cell is safe. "
             "safe_neighborhood_rule: the start cell and its neighbors are safe. "
             "no_guess_rule: retry until the board needs no guess.",
    )
    threshold = st.sidebar.number_input(
        "Border optimization threshold", 0, 100, BORDER_OPTIMIZATION_THRESHOLD
    )
    time_limit = st.sidebar.number_input("Time limit (s)", 1.0, 300.0, 30.0)
    seed = st.sidebar.number_input("Seed", 0, 10**9, 0)

    start = (width // 2, height // 2)
    settings = (width, height, mines, strategy, seed)

    if "grid" not in st.session_state or st.session_state.settings != settings:
        st.session_state.grid = None
        st.session_state.report = None
        st.session_state.run = None
        st.session_state.step = 0
        st.session_state.settings = settings

    col1, col2 = st.columns([3, 1])

    with col1:
        st.subheader("Board")
        btn_col1, btn_col2 = st.columns(2)

        with btn_col1:
            if st.button("Generate Board", type="primary"):
                grid = create_grid(mines, width, height)
                try:
                    st.session_state.report = generate_board(
                        grid, *start, strategy, time_limit=time_limit, rng=random.Random(seed)
                    )
                    st.session_state.grid = grid
                except (ValueError, GenerationBudgetExceeded) as exc:
                    st.error(str(exc))
                    st.session_state.grid = None
                st.session_state.run = None
                st.rerun()

        with btn_col2:
            if st.button("Solve") and st.session_state.grid is not None:
                st.session_state.run = run_solver(st.session_state.grid, start, int(threshold))
                st.session_state.step = len(st.session_state.run["history"]) - 1
                st.rerun()

        grid = st.session_state.grid
        run = st.session_state.run
        if grid is None:
            st.info("Click 'Generate Board' to create a board.")
        elif run is None:
            st.markdown(
                render_board(grid, snapshot(grid), show_mines=True, changed={start}),
                unsafe_allow_html=True,
            )
            st.caption(f"Start cell: {start}")
        else:
            history = run["history"]
            step = st.slider("Step", 0, len(history) - 1, st.session_state.step)
            st.session_state.step = step

            entry = history[step]
            previous = history[step - 1]["view"] if step else entry["view"]
            changed = {
                (x, z)
                for z in range(grid.height)
                for x in range(grid.width)
                if entry["view"][z][x] != previous[z][x]
            }
            final = step == len(history) - 1
            st.markdown(
                render_board(grid, entry["view"], show_mines=final, changed=changed),
                unsafe_allow_html=True,
            )

            label = f"**Step {step}/{len(history) - 1}**: {entry['phase']}, {len(changed)} cells changed"
            if final and run["result"] is GameState.SOLVED:
                st.success(label + ". Solved without guessing.")
            elif final:
                st.error(label + ". A guess would be needed.")
            else:
                st.info(label)

    with col2:
        st.subheader("Statistics")
        report = st.session_state.report
        if report is not None:
            st.metric("Attempts", report.attempts)
            st.metric("Generation time (ms)", f"{report.elapsed_ms:.0f}")
        if st.session_state.run is not None:
            solver = st.session_state.run["solver"]
            st.metric("Solver steps", solver.steps)
            st.text(f"Deduction sweeps: {solver.deduction_sweeps}")
            st.text(f"Backtracking attempts: {solver.backtracking_attempts}")
        if report is None:
            st.info("Generate a board to see statistics.")


if __name__ == "__main__":
    main()
