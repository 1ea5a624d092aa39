from convo_flow.cli import main

raise SystemExit(main())
