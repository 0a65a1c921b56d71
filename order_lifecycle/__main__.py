from order_lifecycle.cli import main

raise SystemExit(main())
