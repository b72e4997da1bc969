"""Static user-facing strings."""

MESSAGES = {
    "load_dataset_error": "Dataset could not be loaded.",
    "dataset_updated": "Dataset updated.",
    "dataset_update_error": "Dataset could not be updated.",
    "dataset_created": "Dataset created.",
    "dataset_create_error": "Dataset could not be created.",
    "dataset_deleted": "Dataset deleted.",
    "dataset_delete_error": "Dataset could not be deleted.",
    "datasets_load_error": "Datasets could not be loaded.",
    "dataset_invalid": "Please enter a name and a symbol.",
    "load_entries_error": "Entries could not be loaded.",
    "missing_fields": "Please enter a value, a label and a date.",
    "entry_created": "Entry created.",
    "entry_create_error": "Entry could not be created.",
    "entry_updated": "Entry updated.",
    "entry_update_error": "Entry could not be updated.",
    "entry_deleted": "Entry deleted.",
    "entry_delete_error": "Entry could not be deleted.",
    "graph_load_error": "Loading the chart data failed.",
    "dataset_meta_error": "The dataset details could not be loaded.",
    "actual": "Actual values",
    "projected": "Projected values",
    "dataset_copied": "Dataset copied.",
    "entry_copy_error": "Dataset copied, but only {copied} of {total} entries.",
    "entries_copy_error": "Dataset copied, but its entries could not be loaded.",
}

UI_TEXT = {
    "headers": {
        "app_title": "Data Tracker",
        "dataset": "Dataset:",
        "create_dataset": "Create dataset",
        "entries": "Entries",
        "graph": {
            "actual": "Chart: Actual",
            "target": "Chart: Target",
            "end_date": "Chart: End date",
        },
        "edit": "Edit",
        "chart_no_data": "No data to display.",
        "confirm_delete": "Do you really want to delete this?",
    },
    "labels": {
        "name": "Name",
        "description": "Description",
        "symbol": "Symbol",
        "target_value": "Target value",
        "start_date": "Start date",
        "end_date": "End date",
        "confirm_delete_dataset": "Confirm deleting the dataset.",
        "confirm_delete_entry": "Confirm deleting the entry.",
        "add_dataset": "Add dataset",
    },
    "tabs": {
        "data": "Data",
        "graph": "Chart",
        "edit": "Edit",
    },
    "table": {
        "label": "Label",
        "value": "Value",
        "date": "Date",
        "actions": "Actions",
        "loading": "Loading entries...",
    },
    "buttons": {
        "add": "Add",
        "clear": "Clear",
        "save": "Save",
        "delete": "Delete",
        "create": "Create",
        "update": "Update",
        "copy": "Create copy",
        "cancel": "Cancel",
        "confirm": "Confirm",
    },
    "graph": {
        "loading": "Loading chart...",
        "x_axis": "Date",
        "y_axis": "Value",
    },
}
