# NOTE: The map converter window needs PyQt5.
#
# Installation (in terminal):
#   pip install PyQt5
#
# For the command line version see cli.py.
import sys
from PyQt5.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QPushButton, QLabel,
    QFileDialog, QTextEdit, QSlider, QHBoxLayout, QCheckBox
)
from PyQt5.QtGui import QPixmap, QImage, qRgb
from PyQt5.QtCore import Qt
from bmp_parser import BMPError, BMPParser
from converter import MapConverter, SYMBOL_COLORS, symbol_rows

class MapConverterWindow(QWidget):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("BMP2MAP")
        self.resize(700, 500)

        self.current_filepath = None

        # Last produced map, kept for the preview
        self.map_rows = None
        self.width = 0
        self.height = 0
        self.scale = 1.0

        layout = QVBoxLayout()

        top_layout = QHBoxLayout()

        # Button to pick the 256-color bitmap
        self.open_button = QPushButton("Open BMP File")
        self.open_button.setFixedSize(150, 50)
        self.open_button.clicked.connect(self.open_file)
        top_layout.addWidget(self.open_button)

        # Button to write the map file
        self.convert_button = QPushButton("Convert to Map")
        self.convert_button.setFixedSize(150, 50)
        self.convert_button.setEnabled(False)
        self.convert_button.clicked.connect(self.convert_file)
        top_layout.addWidget(self.convert_button)

        top_layout.addStretch()

        # Reject bitmaps whose row padding isn't 4-byte aligned
        self.strict_button = QCheckBox("Strict padding")
        top_layout.addWidget(self.strict_button)

        layout.addLayout(top_layout)

        # Label to preview the map
        self.image_label = QLabel("No Map Converted")
        self.image_label.setStyleSheet("border: 1px solid black; background: white;")
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setFixedSize(700, 400)
        layout.addWidget(self.image_label)

        # Text box for header fields and conversion results
        self.metadata_box = QTextEdit("No Metadata Loaded")
        self.metadata_box.setMinimumHeight(150)
        self.metadata_box.setReadOnly(True)
        layout.addWidget(self.metadata_box)

        # Slider for scaling the preview
        self.scale_slider = QSlider(Qt.Horizontal)
        self.scale_slider.setRange(1, 1000)
        self.scale_slider.setValue(100)
        self.scale_slider.valueChanged.connect(self.update_image)
        layout.addWidget(QLabel("Scale"))
        layout.addWidget(self.scale_slider)

        self.setLayout(layout)

    def open_file(self):
        filepath, _ = QFileDialog.getOpenFileName(self, "Open BMP File", "", "BMP Files (*.bmp)")
        if not filepath:
            return
        self.load_file(filepath)

    def load_file(self, filepath):
        try:
            parser = BMPParser(filepath).load()
        except (BMPError, OSError) as e:
            self.metadata_box.setText(f"Could not read {filepath}: {e}")
            self.convert_button.setEnabled(False)
            return False

        # Display header fields
        meta_text = ""
        for k, v in parser.metadata.items():
            meta_text += f"{k}: {v}\n"
        self.metadata_box.setText(meta_text)

        self.current_filepath = filepath
        self.convert_button.setEnabled(True)
        return True

    def convert_file(self):
        if self.current_filepath is None:
            return

        output_filepath, _ = QFileDialog.getSaveFileName(self, "Save map file", "", "Map Files (*.map);;All Files (*)")
        if not output_filepath:
            return
        self.convert_to(output_filepath)

    def convert_to(self, output_filepath):
        converter = MapConverter(strict=self.strict_button.isChecked())
        try:
            info = converter.convert(self.current_filepath, output_filepath)
        except (BMPError, OSError) as e:
            self.metadata_box.append(f"Conversion failed: {e}")
            return None

        self.metadata_box.append(f"Converted to {output_filepath}")
        self.metadata_box.append(f"Padding per row: {info['padding']} bytes")
        self.metadata_box.append(f"Map size: {info['output_size']} bytes")
        self.metadata_box.append(f"Time: {info['time_ms']:.2f} ms")

        self.width = info["width"]
        self.height = info["height"]
        self.map_rows = symbol_rows(info["map_data"], self.width)
        self.update_image()
        return info

    # Redraw the preview at the current scale
    def update_image(self):
        if self.map_rows is None:
            return

        self.scale = self.scale_slider.value() / 100.0

        new_w = max(1, int(self.width * self.scale))
        new_h = max(1, int(self.height * self.scale))

        image = QImage(new_w, new_h, QImage.Format_RGB32)

        for y in range(new_h):
            for x in range(new_w):
                src_x = min(int(x / self.scale), self.width - 1)
                src_y = min(int(y / self.scale), self.height - 1)

                R, G, B = SYMBOL_COLORS[self.map_rows[src_y][src_x]]
                image.setPixel(x, y, qRgb(R, G, B))

        pixmap = QPixmap.fromImage(image)
        self.image_label.setPixmap(pixmap)


def run():
    app = QApplication(sys.argv)
    window = MapConverterWindow()
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(run())
