# This file is the Streamlit entrypoint for the rental pricing operator dashboard.
# It exists to walk the operator through the five selection steps and show the resulting price grid.
# All state lives in the PricingWizardController kept in the Streamlit session.

from __future__ import annotations

from typing import Any

import pandas as pd
import streamlit as st

from rental_pricing.catalog.models import FILTER_STEPS, FilterKey
from rental_pricing.dashboard.api_client import CatalogApiClient
from rental_pricing.dashboard.dashboard_config import load_dashboard_config
from rental_pricing.dashboard.wizard_controller import PricingWizardController

APP_TITLE = "Rental Pricing Catalog"
APP_SUBTITLE = "Narrow the catalog by location, rate type, season and unit to see prices per vehicle."
_PLACEHOLDER = ""


def build_price_grid(vehicles: list[dict[str, Any]]) -> pd.DataFrame:
    """One row per vehicle, one column per (amount, unit) price point."""

    records = []
    for vehicle in vehicles:
        for price in vehicle.get("prices", []):
            records.append(
                {
                    "Vehicle": vehicle["name"],
                    "Duration": f"{price['amount']} {price['unit']}",
                    "amount": price["amount"],
                    "Price": price["price"],
                }
            )
    if not records:
        return pd.DataFrame()

    frame = pd.DataFrame.from_records(records).sort_values(["amount", "Vehicle"], kind="stable")
    durations = list(dict.fromkeys(frame["Duration"]))
    grid = frame.pivot_table(index="Vehicle", columns="Duration", values="Price", aggfunc="first", sort=False)
    return grid.reindex(columns=durations)


def _get_controller() -> PricingWizardController:
    if "pricing_controller" not in st.session_state:
        config = load_dashboard_config()
        client = CatalogApiClient(
            base_url=config.api_base_url,
            timeout_seconds=config.request_timeout_seconds,
        )
        controller = PricingWizardController(client)
        controller.load_initial()
        st.session_state["pricing_controller"] = controller
    return st.session_state["pricing_controller"]


def _render_step(controller: PricingWizardController, key: FilterKey) -> None:
    options = controller.options[key]
    ids = [_PLACEHOLDER] + [str(option["id"]) for option in options]
    names = {str(option["id"]): option.get("name") or str(option["id"]) for option in options}
    current = controller.wizard.get_filter(key)

    selected = st.selectbox(
        key.label,
        ids,
        index=ids.index(current) if current in ids else 0,
        format_func=lambda value: names.get(value, "Select..."),
        key=f"select-{key.param_name}",
    )
    if selected != current:
        controller.select(key, selected)
        st.rerun()


def main() -> None:
    st.set_page_config(page_title=APP_TITLE, layout="wide")
    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)

    controller = _get_controller()
    st.progress(controller.current_step / len(FILTER_STEPS), text=f"Step {controller.current_step} of {len(FILTER_STEPS)}")

    for selection in controller.completed_selections():
        st.markdown(f"**{selection['label']}:** {selection['value'] or '-'}")

    _render_step(controller, FILTER_STEPS[controller.current_step - 1])

    if controller.error:
        st.error(controller.error)

    back_col, next_col, reset_col, search_col = st.columns(4)
    if back_col.button("Back", disabled=controller.current_step == 1):
        controller.back()
        st.rerun()
    if next_col.button("Next", disabled=not controller.wizard.is_step_satisfied(controller.current_step)):
        controller.next_step()
        st.rerun()
    if reset_col.button("Reset"):
        controller.reset()
        st.rerun()
    if search_col.button("Search vehicles", disabled=not controller.wizard.is_ready_for_submission()):
        result = controller.search_vehicles()
        if result.message:
            st.info(result.message)
        grid = build_price_grid(result.vehicles)
        if not grid.empty:
            st.dataframe(grid, use_container_width=True)


if __name__ == "__main__":
    main()
