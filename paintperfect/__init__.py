# PaintPerfect marketplace web app
