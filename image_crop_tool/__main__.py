from image_crop_tool.app import main

main()
