import tkinter as tk
from tkinter import ttk, filedialog, messagebox
import sys
import matplotlib.pyplot as plt
from config.settings import MAX_PREVIEW_ROWS
from controllers.csv_controller import CSVController
from ui.table_view import TableView
from ui.analysis_view import ValidationChartView
from ui.theme import ThemeState

class MainWindow:
    def __init__(self, controller: CSVController | None = None, theme: ThemeState | None = None):
        self.controller = controller or CSVController()
        self.theme = theme or ThemeState()

        self.window = tk.Tk()
        self.window.title("Visor CSV - Carga y Vista Previa")
        self.window.geometry("1200x800")
        self.window.protocol("WM_DELETE_WINDOW", self.on_closing)
        self.style = ttk.Style(self.window)

        # --- Barra superior ---
        self.toolbar = ttk.Frame(self.window, relief=tk.RAISED, borderwidth=1)
        self.toolbar.pack(side="top", fill="x")
        ttk.Button(self.toolbar, text="📂 Elegir CSV", command=self.choose_file_action).pack(side="left", padx=5, pady=5)
        self.btn_local = ttk.Button(self.toolbar, text="🔍 Revisar localmente",
                                    command=lambda: self.run_task("Revisando archivo", self.controller.load_local_preview))
        self.btn_local.pack(side="left", padx=5, pady=5)
        self.btn_upload = ttk.Button(self.toolbar, text="⬆️ Enviar al backend",
                                     command=lambda: self.run_task("Enviando al backend", self.controller.upload_selected))
        self.btn_upload.pack(side="left", padx=5, pady=5)
        ttk.Separator(self.toolbar, orient="vertical").pack(side="left", fill="y", padx=10, pady=5)
        ttk.Button(self.toolbar, text="🧪 Cargar ejemplo",
                   command=lambda: self.run_task("Cargando ejemplo", self.controller.load_sample)).pack(side="left", padx=5, pady=5)
        ttk.Button(self.toolbar, text="💾 Exportar Excel", command=self.export_excel).pack(side="left", padx=5, pady=5)
        self.btn_theme = ttk.Button(self.toolbar, text=self.theme.toggle_label, command=self.toggle_theme)
        self.btn_theme.pack(side="right", padx=5, pady=5)

        # --- Selección y mensajes ---
        info = ttk.Frame(self.window, padding=(10, 5))
        info.pack(side="top", fill="x")
        self.lbl_selected = ttk.Label(info, text="Ningún archivo seleccionado", style="Muted.TLabel")
        self.lbl_selected.pack(side="left")
        ttk.Label(info, text=f"Endpoint: {self.controller.api_base.rstrip('/')}/upload", style="Muted.TLabel").pack(side="right")
        self.lbl_error = ttk.Label(self.window, text="", style="Error.TLabel", padding=(10, 0))
        self.lbl_error.pack(side="top", fill="x")

        # --- Barra de estado ---
        self.status_frame = ttk.Frame(self.window, relief=tk.SUNKEN, padding=(5, 2))
        self.status_frame.pack(side="bottom", fill="x")
        self.lbl_status = ttk.Label(self.status_frame, text="Listo", anchor="w")
        self.lbl_status.pack(side="left", fill="x")
        self.progress = ttk.Progressbar(self.status_frame, mode='indeterminate', length=200)

        # --- Vista previa ---
        body = ttk.Frame(self.window)
        body.pack(fill="both", expand=True, padx=10, pady=5)
        left = ttk.Frame(body)
        left.pack(side="left", fill="both", expand=True)
        ttk.Label(left, text="Vista previa", font=("Arial", 12, "bold")).pack(anchor="w")
        ttk.Label(left, text=f"Muestra hasta {MAX_PREVIEW_ROWS} filas del conjunto actual.", style="Muted.TLabel").pack(anchor="w")
        self.lbl_meta = ttk.Label(left, text="")
        self.lbl_meta.pack(anchor="w", pady=(5, 5))
        self.table = TableView(left)
        self.table.pack(fill="both", expand=True)
        self.hints_frame = ttk.LabelFrame(left, text="Avisos del backend")
        self.lst_hints = tk.Listbox(self.hints_frame, height=4)
        self.lst_hints.pack(fill="x", padx=5, pady=5)

        self.chart = ValidationChartView(body, controller=self.controller)
        self.chart.pack(side="right", fill="y", padx=(10, 0))

        self.apply_theme()
        self._set_actions_enabled(True)
        self.refresh_preview()

    def run_task(self, description, func):
        if self.controller.state.loading: return
        self.window.config(cursor="watch")
        self.lbl_status.config(text=f"⏳ {description}...")
        self.progress.pack(side="right", padx=10)
        self.progress.start(10)
        self._set_actions_enabled(False)
        self.window.update()
        try:
            func()
            self.lbl_status.config(text="❌ Error" if self.controller.last_error else "✅ Listo")
        except Exception as e:
            self.lbl_status.config(text="❌ Error")
            messagebox.showerror("Error", str(e))
        finally:
            self.progress.stop()
            self.progress.pack_forget()
            self.window.config(cursor="")
            self._set_actions_enabled(True)
            self.refresh_preview()

    def _set_actions_enabled(self, enabled):
        has_file = bool(self.controller.selection.path)
        state = "!disabled" if enabled and has_file else "disabled"
        self.btn_local.state([state])
        self.btn_upload.state([state])

    def choose_file_action(self):
        path = filedialog.askopenfilename(filetypes=[("CSV", "*.csv"), ("Todos", "*.*")])
        if not path: return
        self.controller.select_file(path)
        self.lbl_selected.config(text=f"Seleccionado: {self.controller.selection.filename}")
        self._set_actions_enabled(True)
        self.refresh_preview()

    def refresh_preview(self):
        self.lbl_error.config(text=self.controller.last_error or "")
        preview = self.controller.preview
        self.table.show_preview(preview, MAX_PREVIEW_ROWS)
        self.chart.refresh(self.theme.palette)
        if preview is None:
            self.lbl_meta.config(text="Aún no se han cargado datos.")
            self.hints_frame.pack_forget()
            return
        d = preview.data
        self.lbl_meta.config(text=(
            f"{preview.filename or 'desconocido'}   |   Origen: {preview.source_label}   |   "
            f"Delimitador: {d.delimiter}   |   Filas: {d.valid_rows} válidas / {d.total_rows} total   |   "
            f"Filas inválidas: {d.invalid_rows}"
        ))
        self.lst_hints.delete(0, tk.END)
        if preview.errors:
            for msg in preview.errors: self.lst_hints.insert(tk.END, f"• {msg}")
            self.hints_frame.pack(fill="x", pady=(5, 0))
        else:
            self.hints_frame.pack_forget()

    def export_excel(self):
        if self.controller.preview is None:
            messagebox.showwarning("Aviso", "No hay datos cargados para exportar.")
            return
        base = (self.controller.preview.filename or "vista_previa").rsplit(".", 1)[0]
        path = filedialog.asksaveasfilename(initialfile=f"{base}.xlsx", defaultextension=".xlsx", filetypes=[("Excel", "*.xlsx")])
        if not path: return
        figs = {'Validación de filas': self.chart.figure}
        self.run_task(f"Generando {path}", lambda: self.controller.export_report(path, figs))

    def toggle_theme(self):
        self.theme.toggle()
        self.btn_theme.config(text=self.theme.toggle_label)
        self.apply_theme()

    def apply_theme(self):
        self.theme.apply(self.style, self.window)
        p = self.theme.palette
        self.lst_hints.configure(background=p["field"], foreground=p["fg"])
        self.chart.refresh(p)

    def on_closing(self):
        plt.close('all')
        self.window.destroy()
        sys.exit(0)

    def run(self): self.window.mainloop()
