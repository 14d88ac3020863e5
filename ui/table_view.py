import tkinter as tk
from tkinter import ttk

class TableView(ttk.Frame):
    def __init__(self, parent, *args, **kwargs):
        super().__init__(parent, *args, **kwargs)
        control_frame = ttk.Frame(self)
        control_frame.pack(fill="x", pady=(0, 5))
        ttk.Label(control_frame, text="Buscar:").pack(side="left", padx=(0, 5))
        self.search_var = tk.StringVar()
        self.search_entry = ttk.Entry(control_frame, textvariable=self.search_var, width=30)
        self.search_entry.pack(side="left", padx=(0, 10))
        self.search_entry.bind("<KeyRelease>", self._on_search)
        self.clear_search_btn = ttk.Button(control_frame, text="Limpiar", command=self._clear_search)
        self.clear_search_btn.pack(side="left")
        self.status_label = ttk.Label(control_frame, text="")
        self.status_label.pack(side="right")
        tree_frame = ttk.Frame(self)
        tree_frame.pack(fill="both", expand=True)
        self._tree = ttk.Treeview(tree_frame, show="headings")
        self._tree.pack(side="left", fill="both", expand=True)
        self._scroll_y = ttk.Scrollbar(tree_frame, orient="vertical", command=self._tree.yview)
        self._scroll_y.pack(side="right", fill="y")
        self._tree.configure(yscrollcommand=self._scroll_y.set)
        self._scroll_x = ttk.Scrollbar(self, orient="horizontal", command=self._tree.xview)
        self._scroll_x.pack(side="bottom", fill="x")
        self._tree.configure(xscrollcommand=self._scroll_x.set)
        self.caption_label = ttk.Label(self, text="", style="Muted.TLabel")
        self.caption_label.pack(side="bottom", anchor="w", pady=(5, 0))
        self._all_data = []
        self._current_columns = []

    def _on_search(self, event=None):
        search_term = self.search_var.get().lower()
        if not search_term:
            self._display_data(self._all_data)
            self.status_label.config(text=f"Mostrando todas las {len(self._all_data)} filas")
            return
        filtered_data = [row for row in self._all_data if any(search_term in str(cell).lower() for cell in row)]
        self._display_data(filtered_data)
        self.status_label.config(text=f"Mostrando {len(filtered_data)} de {len(self._all_data)} filas")

    def _clear_search(self):
        self.search_var.set("")
        self._display_data(self._all_data)
        self.status_label.config(text=f"Mostrando todas las {len(self._all_data)} filas")

    def _display_data(self, data):
        self.clear()
        if not self._current_columns: return
        # Treeview necesita identificadores únicos; el texto visible es el encabezado real
        col_ids = [f"c{i}" for i in range(len(self._current_columns))]
        self._tree["columns"] = tuple(col_ids)
        for col_id, name in zip(col_ids, self._current_columns):
            self._tree.heading(col_id, text=name or "Columna")
            self._tree.column(col_id, anchor="w", width=160)
        if not data:
            self._tree.insert("", "end", values=("No se encontraron datos válidos.",))
            return
        for row in data:
            safe_row = []
            for i in range(len(self._current_columns)):
                if i < len(row): safe_row.append("" if row[i] is None else str(row[i]))
                else: safe_row.append("")
            self._tree.insert("", "end", values=tuple(safe_row))

    def clear(self):
        for r in self._tree.get_children(): self._tree.delete(r)
        self._tree["columns"] = ()

    def show_preview(self, preview, limit):
        """Muestra como máximo `limit` filas válidas del preview."""
        self.search_var.set("")
        if preview is None:
            self._current_columns = []
            self._all_data = []
            self.clear()
            self.status_label.config(text="")
            self.caption_label.config(text="Aún no se han cargado datos.")
            return
        self._current_columns = list(preview.data.columns)
        self._all_data = preview.visible_rows(limit)
        self._display_data(self._all_data)
        hidden = preview.hidden_rows(limit)
        extra = f" (+ {hidden} más)" if hidden > 0 else ""
        self.caption_label.config(text=f"Mostrando {len(self._all_data)} filas{extra}.")
        self.status_label.config(text=f"Total: {len(self._all_data)} filas")
